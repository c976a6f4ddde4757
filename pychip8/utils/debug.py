"""Category-gated debug output controlled by the ``CHIP8_DEBUG`` variable.

``CHIP8_DEBUG=cpu,input`` enables the listed categories, ``all`` enables
every category. Categories used by the interpreter: ``cpu``, ``input``,
``loader``, ``state``, ``trace``, ``overlay`` and ``perf``.
"""

from __future__ import annotations

import os

ENV_VAR = "CHIP8_DEBUG"

_active: frozenset[str] | None = None


def parse_categories(value: str) -> frozenset[str]:
    """Split a comma separated category list into lower-case names."""

    names = (name.strip().lower() for name in value.split(","))
    return frozenset(name for name in names if name)


def _categories() -> frozenset[str]:
    global _active
    if _active is None:
        _active = parse_categories(os.environ.get(ENV_VAR, ""))
    return _active


def reload_categories() -> frozenset[str]:
    """Drop the cached category set and read the environment again."""

    global _active
    _active = None
    return _categories()


def debug_enabled(category: str | None = None) -> bool:
    active = _categories()
    if category is None or "all" in active:
        return bool(active)
    return category.lower() in active


def _render(message: str, args: tuple) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return f"{message} {args!r}"


def debug_log(category: str, message: str, *args) -> None:
    if debug_enabled(category):
        print(f"[CHIP8][{category}] {_render(message, args)}")
