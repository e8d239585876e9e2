from __future__ import annotations

import getpass
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from http_smoke.core.models import Credentials, SmokeConfig

PasswordPrompt = Callable[[str], str]


@dataclass(frozen=True)
class TransportPolicy:
    """Transport-level options applied to a single request."""

    timeout_s: float = 10.0
    allow_redirects: bool = True
    proxies: Optional[Dict[str, str]] = None
    no_proxy: str = ""
    auth: Optional[Tuple[str, str]] = None


def proxies_for(proxy: str) -> Optional[Dict[str, str]]:
    """Build a requests proxies mapping; one proxy serves both schemes."""
    if not proxy:
        return None
    return {"http": proxy, "https": proxy}


def resolve_credentials(
    credentials: Optional[Credentials],
    prompt: PasswordPrompt = getpass.getpass,
) -> Optional[Credentials]:
    """Fill in a missing password interactively. Returns the completed credentials."""
    if credentials is None:
        return None
    if credentials.password is not None:
        return credentials
    password = prompt(f"Password for {credentials.username}: ")
    return Credentials(username=credentials.username, password=password)


def build_policy(config: SmokeConfig, prompt: PasswordPrompt = getpass.getpass) -> TransportPolicy:
    """Derive the transport policy for the next request from the current config."""
    creds = resolve_credentials(config.credentials, prompt)
    if creds is not config.credentials:
        # remember the prompted password for the rest of the run
        config.credentials = creds

    return TransportPolicy(
        timeout_s=config.timeout_s,
        allow_redirects=config.follow_redirects,
        proxies=proxies_for(config.proxy),
        no_proxy=config.no_proxy,
        auth=(creds.username, creds.password or "") if creds else None,
    )
