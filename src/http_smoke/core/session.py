from __future__ import annotations

import getpass
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional, TextIO, Tuple, Union

from http_smoke.check.assertions import AssertionEngine
from http_smoke.check.reporter import Reporter
from http_smoke.core.models import CheckResult, LastResponse, ReportState, SmokeConfig
from http_smoke.errors import SmokeUsageError
from http_smoke.hooks import register_builtin_hooks, resolve
from http_smoke.http.client import HttpClient, RequestsHttpClient
from http_smoke.http.executor import RequestExecutor
from http_smoke.http.policies import PasswordPrompt
from http_smoke.http.tcp import tcp_connect
from http_smoke.utils.logging import get_logger

HOOK_ENV_VAR = "SMOKE_AFTER_RESPONSE"

FormPath = Union[str, Path]


class SmokeSession:
    """
    One smoke-test run: configuration, the last response and the report.

    Typical use::

        with SmokeSession() as smoke:
            smoke.config.set_url_prefix("http://localhost:8080")
            smoke.url_ok("/")
            smoke.assert_body("Welcome")
            smoke.report()
    """

    def __init__(
        self,
        config: Optional[SmokeConfig] = None,
        client: Optional[HttpClient] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        prompt: PasswordPrompt = getpass.getpass,
        env: Optional[Mapping[str, str]] = None,
    ):
        self.config = config or SmokeConfig()
        self.client = client or RequestsHttpClient()
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.log = get_logger("http_smoke.session")

        env = os.environ if env is None else env
        if self.config.after_response is None and env.get(HOOK_ENV_VAR):
            self.config.set_after_response(env[HOOK_ENV_VAR])
        register_builtin_hooks()

        self.last = LastResponse()
        self.state = ReportState()
        self.reporter = Reporter(self.state, self.out)
        self.checks = AssertionEngine(self.reporter, lambda: self.last)
        self.executor = RequestExecutor(self.client, self.config, self.out, self.err, prompt)

    # ---------- Requests ----------

    def request(
        self,
        method: str,
        url: str,
        form_path: Optional[FormPath] = None,
        extra_headers: Optional[List[Tuple[str, str]]] = None,
    ) -> LastResponse:
        """Execute a request, replace the last response and run the after-response hook."""
        self.last = self.executor.execute(method, url, form_path, extra_headers)
        self._after_response()
        return self.last

    def url(self, url: str) -> LastResponse:
        return self.request("GET", url)

    def url_ok(self, url: str) -> LastResponse:
        resp = self.url(url)
        self.assert_code_ok()
        return resp

    def form(self, url: str, form_path: Optional[FormPath] = None) -> LastResponse:
        return self.request("POST", url, form_path)

    def form_ok(self, url: str, form_path: Optional[FormPath] = None) -> LastResponse:
        resp = self.form(url, form_path)
        self.assert_code_ok()
        return resp

    def options(self, url: str) -> LastResponse:
        return self.request("OPTIONS", url)

    def url_cors(self, url: str, preflight: bool = False) -> LastResponse:
        """
        CORS request. Requires an origin to be configured.

        A plain GET carries the Origin header; with preflight=True an OPTIONS
        request announcing a GET is sent instead.
        """
        if not self.config.origin:
            raise SmokeUsageError("An origin must be set before a CORS request")
        if preflight:
            return self.request("OPTIONS", url, extra_headers=[("Access-Control-Request-Method", "GET")])
        return self.request("GET", url)

    def tcp_ok(self, host: str, port: int) -> CheckResult:
        """Check that a raw TCP connection can be opened. The last response is left alone."""
        print(f"> TCP {host}:{port}", file=self.out)
        return self.checks.tcp(host, port, tcp_connect(host, port, self.config.timeout_s))

    def _after_response(self) -> None:
        hook_ref = self.config.after_response
        if not hook_ref:
            return
        hook = resolve(hook_ref)
        self.log.debug("Running after-response hook %s", getattr(hook, "__name__", hook))
        hook(self)

    # ---------- Assertions ----------

    def assert_body(self, pattern: str) -> CheckResult:
        return self.checks.body(pattern)

    def assert_headers(self, pattern: str) -> CheckResult:
        return self.checks.headers(pattern)

    def assert_code(self, expected: int) -> CheckResult:
        return self.checks.code(expected)

    def assert_code_ok(self) -> CheckResult:
        return self.checks.code_ok()

    def assert_no_response(self) -> CheckResult:
        return self.checks.no_response()

    # ---------- Report ----------

    @property
    def ok_count(self) -> int:
        return self.state.ok_count

    @property
    def fail_count(self) -> int:
        return self.state.fail_count

    def summary(self) -> int:
        """Print the summary line and return the exit code without exiting."""
        return self.reporter.summary()

    def report(self) -> None:
        """Print the summary and exit: 0 when every check passed, 1 otherwise."""
        self.reporter.report()

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "SmokeSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
