from __future__ import annotations

import socket

from http_smoke.utils.logging import get_logger

log = get_logger("http_smoke.tcp")


def tcp_connect(host: str, port: int, timeout_s: float = 10.0) -> bool:
    """Return True when a TCP connection to host:port can be opened within the timeout."""
    try:
        with socket.create_connection((host, int(port)), timeout=timeout_s):
            return True
    except OSError as e:
        log.warning("TCP connect to %s:%s failed (%s)", host, port, e)
        return False
