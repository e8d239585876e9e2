from __future__ import annotations

import importlib
from typing import Dict, List, Union

from http_smoke.core.models import AfterResponseHook
from http_smoke.errors import HookError

_HOOKS: Dict[str, AfterResponseHook] = {}


def register(name: str, hook: AfterResponseHook) -> None:
    """Register an after-response hook under a name."""
    key = str(name or "").strip()
    if not key:
        raise HookError("Hook name cannot be empty")
    _HOOKS[key] = hook


def get(name: str) -> AfterResponseHook:
    """Retrieve a registered hook by name."""
    if name not in _HOOKS:
        known = ", ".join(sorted(_HOOKS))
        raise HookError(f"Hook not registered: {name}. Known hooks: {known}")
    return _HOOKS[name]


def registered_hooks() -> List[str]:
    return sorted(_HOOKS)


def _import_hook(path: str) -> AfterResponseHook:
    module_name, _, attr = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise HookError(f"Cannot import hook module '{module_name}': {e}") from e
    hook = getattr(module, attr, None)
    if not callable(hook):
        raise HookError(f"Hook '{path}' is not a callable")
    return hook


def resolve(hook: Union[str, AfterResponseHook]) -> AfterResponseHook:
    """
    Resolve a hook reference.

    Accepts a callable, a registered hook name, or a "package.module:function"
    import path.
    """
    if callable(hook):
        return hook
    name = str(hook).strip()
    if name in _HOOKS:
        return _HOOKS[name]
    if ":" in name:
        return _import_hook(name)
    return get(name)
