"""Built-in after-response hooks for picking up fresh CSRF tokens."""

from __future__ import annotations

from typing import Any, Optional

from bs4 import BeautifulSoup

from http_smoke.utils.logging import get_logger

log = get_logger("http_smoke.hooks")

CSRF_HEADERS = ("X-CSRF-Token", "X-XSRF-Token")


def find_csrf_in_html(html: str) -> Optional[str]:
    """
    Find a CSRF token in an HTML page.

    Looks at the first <input> whose name mentions "csrf", then at a
    <meta name="csrf-token"> tag.
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")

    for inp in soup.find_all("input"):
        name = str(inp.get("name") or "").lower()
        if "csrf" in name and inp.has_attr("value"):
            value_raw: Any = inp.get("value")
            return value_raw[0] if isinstance(value_raw, list) else str(value_raw)

    meta = soup.select_one('meta[name="csrf-token"]')
    if meta and meta.has_attr("content"):
        return str(meta.get("content"))

    return None


def csrf_from_form(session) -> None:
    """Install the CSRF token found in the last response body, if any."""
    token = find_csrf_in_html(session.last.body)
    if token:
        log.debug("CSRF token picked up from body")
        session.config.set_csrf(token)


def csrf_from_header(session) -> None:
    """Install the CSRF token sent in a response header, if any."""
    for name in CSRF_HEADERS:
        token = session.last.header(name)
        if token:
            log.debug("CSRF token picked up from %s header", name)
            session.config.set_csrf(token)
            return
