from http_smoke.core.models import NO_RESPONSE, LastResponse, ReportState, SmokeConfig
from http_smoke.core.session import SmokeSession
from http_smoke.errors import HookError, SmokeError, SmokeUsageError
from http_smoke.http.forms import CSRF_PLACEHOLDER

__version__ = "0.1.0"

__all__ = [
    "CSRF_PLACEHOLDER",
    "HookError",
    "LastResponse",
    "NO_RESPONSE",
    "ReportState",
    "SmokeConfig",
    "SmokeError",
    "SmokeSession",
    "SmokeUsageError",
]
