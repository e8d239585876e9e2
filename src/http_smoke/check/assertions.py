"""
Checks against the last response.

Every check prints one line and updates the report; none of them raise, so a
run always reports every failure in one pass.
"""

from __future__ import annotations

import re
from typing import Callable

from http_smoke.check.reporter import Reporter
from http_smoke.core.models import NO_RESPONSE, CheckResult, LastResponse


def pattern_found(pattern: str, text: str) -> bool:
    """
    Loose match: regex search anywhere in the text.

    Patterns that do not compile are matched as literal substrings.
    """
    try:
        return re.search(pattern, text, re.MULTILINE) is not None
    except re.error:
        return pattern in text


def _got(resp: LastResponse) -> str:
    return f"(got {resp.code})"


class AssertionEngine:
    """Evaluates checks against whatever response the getter currently returns."""

    def __init__(self, reporter: Reporter, last_response: Callable[[], LastResponse]):
        self.reporter = reporter
        self._last = last_response

    def body(self, pattern: str) -> CheckResult:
        resp = self._last()
        if resp.responded and pattern_found(pattern, resp.body):
            return self.reporter.record(CheckResult(True, f'Body contains "{pattern}"'))
        return self.reporter.record(CheckResult(False, f'Body does not contain "{pattern}"'))

    def headers(self, pattern: str) -> CheckResult:
        resp = self._last()
        if resp.responded and pattern_found(pattern, resp.header_text()):
            return self.reporter.record(CheckResult(True, f'Headers contain "{pattern}"'))
        return self.reporter.record(CheckResult(False, f'Headers do not contain "{pattern}"'))

    def code(self, expected: int) -> CheckResult:
        resp = self._last()
        ok = resp.responded and resp.code == int(expected)
        desc = f"{expected} Response code"
        return self.reporter.record(CheckResult(ok, desc if ok else f"{desc} {_got(resp)}"))

    def code_ok(self) -> CheckResult:
        resp = self._last()
        ok = resp.responded and 200 <= int(resp.code) < 300
        desc = "2xx Response code"
        return self.reporter.record(CheckResult(ok, desc if ok else f"{desc} {_got(resp)}"))

    def no_response(self) -> CheckResult:
        resp = self._last()
        if resp.code is NO_RESPONSE:
            return self.reporter.record(CheckResult(True, "No response from server"))
        return self.reporter.record(CheckResult(False, f"Got a response from server ({resp.code})"))

    def tcp(self, host: str, port: int, connected: bool) -> CheckResult:
        return self.reporter.record(CheckResult(connected, f"TCP connection to {host}:{port}"))
