from __future__ import annotations


class SmokeError(Exception):
    """Base class for http_smoke errors."""


class SmokeUsageError(SmokeError, ValueError):
    """Raised when the tool is driven incorrectly (missing origin, bad step, ...)."""


class HookError(SmokeUsageError):
    """Raised when an after-response hook cannot be resolved."""
