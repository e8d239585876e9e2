from http_smoke.hooks.builtin import csrf_from_form, csrf_from_header
from http_smoke.hooks.registry import get, register, registered_hooks, resolve


def register_builtin_hooks() -> None:
    register("csrf_from_form", csrf_from_form)
    register("csrf_from_header", csrf_from_header)


__all__ = [
    "get",
    "register",
    "register_builtin_hooks",
    "registered_hooks",
    "resolve",
]
