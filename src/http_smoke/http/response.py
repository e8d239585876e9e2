from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from http_smoke.core.models import NO_RESPONSE, ResponseCode


@dataclass(frozen=True)
class HttpResponse:
    """Transport-level response data."""

    status_code: ResponseCode
    status_line: str = ""
    header_lines: List[str] = field(default_factory=list)
    text: str = ""
    error: str = ""

    @classmethod
    def no_response(cls, error: str = "") -> "HttpResponse":
        return cls(status_code=NO_RESPONSE, error=error)

    def lines(self) -> List[str]:
        """Status line followed by the header lines, as received."""
        if not self.status_line:
            return list(self.header_lines)
        return [self.status_line, *self.header_lines]
