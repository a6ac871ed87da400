"""Public runtime orchestration entry points.

This package groups the interactive bootstrap (``run_tui``), the event loop
and the only code that talks to ``jj``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .loop import RuntimeLoopTiming, SessionDriver


def run_tui(*args, **kwargs):
    """Lazily import the TUI entrypoint to avoid terminal setup on import."""
    from .app import run_tui as _run_tui

    return _run_tui(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name in {"RuntimeLoopTiming", "SessionDriver"}:
        from . import loop as _loop

        return getattr(_loop, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RuntimeLoopTiming",
    "SessionDriver",
    "run_main_loop",
    "run_tui",
]
