from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

CSRF_PLACEHOLDER = "__SMOKE_CSRF_TOKEN__"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def render_csrf(template: bytes, token: str) -> bytes:
    """Replace every CSRF placeholder with the token, literally (no escaping)."""
    if not token:
        return template
    return template.replace(CSRF_PLACEHOLDER.encode("utf-8"), token.encode("utf-8"))


def read_form(path: Union[str, Path], csrf_token: Optional[str] = None) -> bytes:
    """
    Read a form-data file and return the request body.

    The file bytes are sent as-is, whatever their encoding, except that the
    CSRF placeholder is substituted when a token is given.
    """
    return render_csrf(Path(path).read_bytes(), csrf_token or "")
