from __future__ import annotations

from typing import List, Optional, Protocol

import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import should_bypass_proxies

from http_smoke.core.models import RequestSpec
from http_smoke.http.policies import TransportPolicy
from http_smoke.http.response import HttpResponse
from http_smoke.utils.logging import get_logger

_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


class HttpClient(Protocol):
    """Protocol for HTTP clients."""

    def send(self, req: RequestSpec, policy: TransportPolicy) -> HttpResponse: ...


def _status_line(r: requests.Response) -> str:
    raw = getattr(r, "raw", None)
    version = _HTTP_VERSIONS.get(getattr(raw, "version", 11), "HTTP/1.1")
    reason = r.reason or ""
    return f"{version} {r.status_code} {reason}".rstrip()


def _header_lines(r: requests.Response) -> List[str]:
    """Header lines in receipt order, keeping repeated headers separate."""
    raw_headers = getattr(getattr(r, "raw", None), "headers", None)
    iteritems = getattr(raw_headers, "iteritems", None)
    if callable(iteritems):
        return [f"{k}: {v}" for k, v in iteritems()]
    return [f"{k}: {v}" for k, v in r.headers.items()]


class RequestsHttpClient:
    """HTTP client using the requests library. Cookies persist across requests."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.log = get_logger("http_smoke.http")

    def send(self, req: RequestSpec, policy: TransportPolicy) -> HttpResponse:
        """Send one request. Any transport failure becomes a no-response result."""
        headers: CaseInsensitiveDict = CaseInsensitiveDict()
        for name, value in req.headers:
            headers[name] = value

        proxies = policy.proxies
        if proxies and policy.no_proxy and should_bypass_proxies(req.url, no_proxy=policy.no_proxy):
            # None entries also drop session and environment proxies
            proxies = {"http": None, "https": None}

        try:
            r = self.session.request(
                method=req.method,
                url=req.url,
                headers=dict(headers),
                data=req.body,
                auth=policy.auth,
                proxies=proxies,
                allow_redirects=policy.allow_redirects,
                timeout=policy.timeout_s,
            )
        except requests.RequestException as e:
            self.log.warning("No response from %s %s (%s: %s)", req.method, req.url, type(e).__name__, e)
            return HttpResponse.no_response(error=f"{type(e).__name__}: {e}")

        ct = r.headers.get("Content-Type", "")

        # If charset not specified, force utf-8 for text-ish content
        if "charset=" not in ct.lower() and ("text/html" in ct.lower() or "text/plain" in ct.lower()):
            r.encoding = "utf-8"

        self.log.debug("%s %s -> %s", req.method, req.url, r.status_code)
        return HttpResponse(
            status_code=r.status_code,
            status_line=_status_line(r),
            header_lines=_header_lines(r),
            text=r.text,
        )

    def close(self) -> None:
        self.session.close()
