from __future__ import annotations

import getpass
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Tuple, Union
from urllib.parse import urlsplit

from http_smoke.core.models import LastResponse, RequestSpec, SmokeConfig
from http_smoke.http.client import HttpClient
from http_smoke.http.forms import FORM_CONTENT_TYPE, read_form
from http_smoke.http.policies import PasswordPrompt, TransportPolicy, build_policy
from http_smoke.http.response import HttpResponse
from http_smoke.utils.logging import get_logger


def is_absolute(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme and parts.netloc)


def resolve_url(url: str, prefix: str) -> str:
    """Prefix relative URLs by plain concatenation; absolute URLs pass through."""
    if is_absolute(url):
        return url
    return f"{prefix}{url}"


class RequestExecutor:
    """
    Turns the current configuration plus (method, url, form file) into one
    HTTP request and captures the outcome as a LastResponse.
    """

    def __init__(
        self,
        client: HttpClient,
        config: SmokeConfig,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        prompt: PasswordPrompt = getpass.getpass,
    ):
        self.client = client
        self.config = config
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.prompt = prompt
        self.log = get_logger("http_smoke.executor")

    def build_request(
        self,
        method: str,
        url: str,
        form_path: Optional[Union[str, Path]] = None,
        extra_headers: Optional[List[Tuple[str, str]]] = None,
    ) -> RequestSpec:
        """Resolve URL, headers and body for the request from the current config."""
        cfg = self.config
        method = method.upper()

        headers: List[Tuple[str, str]] = []
        if cfg.host_override:
            headers.append(("Host", cfg.host_override))
        if cfg.origin:
            headers.append(("Origin", cfg.origin))
        headers.extend(cfg.header_items())
        headers.extend(extra_headers or [])

        body: Optional[bytes] = None
        if form_path is not None:
            token = cfg.csrf_token if method == "POST" else ""
            body = read_form(form_path, token)
            if not any(name.lower() == "content-type" for name, _ in headers):
                headers.append(("Content-Type", FORM_CONTENT_TYPE))
        elif method == "POST":
            body = b""

        return RequestSpec(url=resolve_url(url, cfg.url_prefix), method=method, headers=headers, body=body)

    def execute(
        self,
        method: str,
        url: str,
        form_path: Optional[Union[str, Path]] = None,
        extra_headers: Optional[List[Tuple[str, str]]] = None,
    ) -> LastResponse:
        """Perform one request. Transport failures are returned as a no-response result."""
        req = self.build_request(method, url, form_path, extra_headers)
        policy = build_policy(self.config, self.prompt)

        print(f"> {req.method} {req.url}", file=self.out)
        self.log.info("Request %s %s", req.method, req.url)

        if self.config.debug:
            self._debug_request(req, policy)

        resp = self.client.send(req, policy)

        if self.config.debug:
            self._debug_response(resp)

        return LastResponse(
            code=resp.status_code,
            body=resp.text,
            headers=resp.lines(),
            method=req.method,
            url=req.url,
        )

    # ---------- Debug output ----------

    def _debug_request(self, req: RequestSpec, policy: TransportPolicy) -> None:
        err = self.err
        print(f"* {req.method} {req.url}", file=err)
        print(
            f"* timeout={policy.timeout_s}s follow_redirects={policy.allow_redirects} "
            f"proxy={'on' if policy.proxies else 'off'} auth={'basic' if policy.auth else 'none'}",
            file=err,
        )
        for name, value in req.headers:
            print(f"> {name}: {value}", file=err)
        if req.body:
            print(">", file=err)
            print(req.body.decode("utf-8", errors="replace"), file=err)

    def _debug_response(self, resp: HttpResponse) -> None:
        err = self.err
        if not resp.status_line:
            print(f"* no response ({resp.error})", file=err)
            return
        for line in resp.lines():
            print(f"< {line}", file=err)
        print("<", file=err)
        print(resp.text, file=err)
