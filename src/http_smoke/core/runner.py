from __future__ import annotations

from typing import Optional

from http_smoke.config_models import SmokeSuiteConfig, StepConfig, resolve_form_path
from http_smoke.core.session import SmokeSession
from http_smoke.utils.logging import get_logger


class SuiteRunner:
    """
    Runs the steps of a validated suite against a session, in order.

    Failed checks never stop the run; the caller decides what to do with the
    summary exit code.
    """

    def __init__(self, session: SmokeSession, suite_path: str = "."):
        """
        Args:
            session: Session carrying the suite configuration.
            suite_path: Path of the suite file; form paths are resolved against it.
        """
        self.session = session
        self.suite_path = suite_path
        self.log = get_logger("http_smoke.runner")

    def run(self, suite: SmokeSuiteConfig) -> int:
        """Run every step and return the summary exit code."""
        self.log.info("Suite started: %s (%s steps)", suite.suite.name, len(suite.steps))

        for index, step in enumerate(suite.steps, start=1):
            self.log.debug("Step %s: %s", index, step.name or step.url or step.tcp)
            self.run_step(step)

        code = self.session.summary()
        self.log.info(
            "Suite finished: %s ok=%s failed=%s",
            suite.suite.name,
            self.session.ok_count,
            self.session.fail_count,
        )
        return code

    def run_step(self, step: StepConfig) -> None:
        s = self.session

        if step.tcp is not None:
            s.tcp_ok(step.tcp.host, step.tcp.port)
            return

        for name, value in step.headers.items():
            s.config.set_header(name, value)
        if step.csrf_token is not None:
            s.config.set_csrf(step.csrf_token)

        url = step.url or ""
        if step.cors:
            s.url_cors(url, preflight=step.preflight)
        else:
            form = self._form_path(step.form)
            s.request(step.method, url, form)

        self._check(step)

    def _form_path(self, form: Optional[str]):
        if not form:
            return None
        return resolve_form_path(form, self.suite_path)

    def _check(self, step: StepConfig) -> None:
        s = self.session
        expect = step.expect

        if expect.code_ok:
            s.assert_code_ok()
        if expect.code is not None:
            s.assert_code(expect.code)
        if expect.no_response:
            s.assert_no_response()
        for pattern in expect.body:
            s.assert_body(pattern)
        for pattern in expect.headers:
            s.assert_headers(pattern)
