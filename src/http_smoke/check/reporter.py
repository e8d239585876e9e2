from __future__ import annotations

import sys
from typing import Optional, TextIO

from http_smoke.core.models import CheckResult, ReportState

OK_MARK = "[ OK ]"
FAIL_MARK = "[FAIL]"


class Reporter:
    """Prints check lines and the final summary."""

    def __init__(self, state: Optional[ReportState] = None, out: Optional[TextIO] = None):
        self.state = state if state is not None else ReportState()
        self.out = out or sys.stdout

    def record(self, result: CheckResult) -> CheckResult:
        """Count a check and print its line."""
        self.state.record(result)
        mark = OK_MARK if result.ok else FAIL_MARK
        print(f"    {mark} {result.description}", file=self.out)
        return result

    def exit_code(self) -> int:
        return 0 if self.state.fail_count == 0 else 1

    def summary(self) -> int:
        """Print the summary line and return the exit code."""
        s = self.state
        if s.fail_count == 0:
            print(f"OK ({s.ok_count}/{s.total})", file=self.out)
        else:
            print(f"FAILED ({s.fail_count} failed of {s.total})", file=self.out)
        return self.exit_code()

    def report(self) -> None:
        """Print the summary and terminate with its exit code."""
        raise SystemExit(self.summary())
