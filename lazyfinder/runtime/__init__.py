"""Interactive runtime: session state, search worker, and the event loop.

The loop entry points are imported lazily so that importing state or
pagination helpers does not pull in the terminal and rendering stack.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .loop import RuntimeLoopTiming


def run_app(*args, **kwargs):
    """Lazily import the interactive bootstrap to avoid package-import cycles."""
    from .loop import run_app as _run_app

    return _run_app(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name == "RuntimeLoopTiming":
        from . import loop as _loop

        return getattr(_loop, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RuntimeLoopTiming",
    "run_app",
    "run_main_loop",
]
