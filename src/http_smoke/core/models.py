from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union


class NoResponse:
    """Marker for "no HTTP response was obtained"."""

    _instance: Optional["NoResponse"] = None

    def __new__(cls) -> "NoResponse":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "no response"

    def __str__(self) -> str:
        return "no response"

    def __bool__(self) -> bool:
        return False


NO_RESPONSE = NoResponse()

ResponseCode = Union[int, NoResponse]
AfterResponseHook = Callable[[Any], None]


@dataclass(frozen=True)
class Credentials:
    """Basic-auth credentials. A missing password is prompted for at request time."""

    username: str
    password: Optional[str] = None


def _header_key(line: str) -> str:
    return line.split(":", 1)[0].strip().lower()


@dataclass
class SmokeConfig:
    """
    Mutable configuration applied to every subsequent request.

    Empty strings mean "not set" for all string options.
    """

    url_prefix: str = ""
    host_override: str = ""
    extra_headers: List[str] = field(default_factory=list)
    origin: str = ""
    proxy: str = ""
    no_proxy: str = ""
    credentials: Optional[Credentials] = None
    csrf_token: str = ""
    follow_redirects: bool = True
    debug: bool = False
    timeout_s: float = 10.0
    after_response: Optional[Union[str, AfterResponseHook]] = None

    def set_url_prefix(self, prefix: str) -> None:
        self.url_prefix = prefix

    def set_host(self, host: str) -> None:
        self.host_override = host

    def unset_host(self) -> None:
        self.host_override = ""

    def set_header(self, name: str, value: str) -> None:
        """Add a header, replacing an existing one with the same (case-insensitive) name in place."""
        line = f"{name}: {value}"
        key = name.strip().lower()
        for i, existing in enumerate(self.extra_headers):
            if _header_key(existing) == key:
                self.extra_headers[i] = line
                return
        self.extra_headers.append(line)

    def unset_header(self, name: str) -> None:
        key = name.strip().lower()
        self.extra_headers = [h for h in self.extra_headers if _header_key(h) != key]

    def header_items(self) -> List[tuple[str, str]]:
        """Return configured extra headers as (name, value) pairs, in order."""
        items = []
        for line in self.extra_headers:
            name, _, value = line.partition(":")
            items.append((name.strip(), value.strip()))
        return items

    def set_origin(self, origin: str) -> None:
        self.origin = origin

    def unset_origin(self) -> None:
        self.origin = ""

    def set_proxy(self, proxy: str, no_proxy: str = "") -> None:
        self.proxy = proxy
        self.no_proxy = no_proxy

    def unset_proxy(self) -> None:
        self.proxy = ""
        self.no_proxy = ""

    def set_credentials(self, username: str, password: Optional[str] = None) -> None:
        self.credentials = Credentials(username=username, password=password)

    def unset_credentials(self) -> None:
        self.credentials = None

    def set_csrf(self, token: str) -> None:
        self.csrf_token = token

    def unset_csrf(self) -> None:
        self.csrf_token = ""

    def set_follow_redirects(self, enabled: bool = True) -> None:
        self.follow_redirects = enabled

    def no_follow_redirects(self) -> None:
        self.follow_redirects = False

    def set_debug(self, enabled: bool = True) -> None:
        self.debug = enabled

    def set_timeout(self, seconds: float) -> None:
        self.timeout_s = seconds

    def set_after_response(self, hook: Optional[Union[str, AfterResponseHook]]) -> None:
        self.after_response = hook


@dataclass(frozen=True)
class RequestSpec:
    """Fully resolved HTTP request, ready for the transport."""

    url: str
    method: str = "GET"
    headers: List[tuple[str, str]] = field(default_factory=list)
    body: Optional[bytes] = None


@dataclass(frozen=True)
class LastResponse:
    """Outcome of the most recent request."""

    code: ResponseCode = NO_RESPONSE
    body: str = ""
    headers: List[str] = field(default_factory=list)
    method: str = ""
    url: str = ""

    @property
    def responded(self) -> bool:
        return self.code is not NO_RESPONSE

    def header_text(self) -> str:
        return "\n".join(self.headers)

    def header(self, name: str) -> Optional[str]:
        """Return the first value of a response header, or None."""
        key = name.strip().lower()
        for line in self.headers:
            if ":" in line and _header_key(line) == key:
                return line.split(":", 1)[1].strip()
        return None


@dataclass(frozen=True)
class CheckResult:
    """Result of a single check."""

    ok: bool
    description: str


@dataclass
class ReportState:
    """Running tally of checks."""

    ok_count: int = 0
    fail_count: int = 0
    results: List[CheckResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.ok_count + self.fail_count

    def record(self, result: CheckResult) -> None:
        if result.ok:
            self.ok_count += 1
        else:
            self.fail_count += 1
        self.results.append(result)
