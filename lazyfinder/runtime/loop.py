"""Main interactive event loop and its bootstrap.

The loop owns the session exclusively: it reads one key at a time, lets the
app apply finished searches on every tick, and redraws only when dirty.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from ..config import Settings, save_show_preview
from ..input import read_key
from ..render import list_rows_for_height, render_frame
from ..search.engine import SearchEngine
from ..terminal import TerminalController
from .app import App

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    tick_ms: int = 50


def run_main_loop(
    app: App,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    style: str,
    no_color: bool,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run until a quit key is pressed.

    Each iteration resizes bookkeeping, applies finished searches and the
    debounce check, redraws when needed, then waits up to one tick for input.
    """
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                last_size = size
                app.visible_rows = list_rows_for_height(term.lines)
                app.session.dirty = True

            app.tick(time.monotonic())
            if app.session.dirty:
                terminal.write(render_frame(app, term.columns, term.lines, style=style, no_color=no_color))
                app.session.dirty = False

            key = read_key(stdin_fd, timeout_ms=timing.tick_ms)
            if key and app.handle_key(key, time.monotonic()):
                return


def run_app(root: Path, settings: Settings, initial_pattern: str | None = None, no_color: bool = False) -> None:
    """Create the engine and app for ``root`` and run the interactive loop.

    Raises ``RootDirectoryError`` before touching the terminal when ``root``
    cannot be listed.
    """
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("lazyfinder needs an interactive terminal (use --list or --grep otherwise).")

    engine = SearchEngine(
        root,
        cache_seconds=settings.cache_seconds,
        query_cache_max=settings.query_cache_max,
        max_open_files=settings.max_open_files,
    )
    try:
        app = App(
            engine,
            page_size=settings.page_size,
            debounce_seconds=settings.debounce_seconds,
            initial_pattern=initial_pattern,
            show_preview=settings.show_preview,
            on_preview_toggled=save_show_preview,
        )
        app.start()
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
        logger.info("interactive session started for %s", engine.root)
        run_main_loop(app, terminal, sys.stdin.fileno(), style=settings.style, no_color=no_color)
    finally:
        engine.close()


__all__ = ["RuntimeLoopTiming", "run_app", "run_main_loop"]
