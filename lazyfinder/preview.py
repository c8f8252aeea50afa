"""Syntax-highlighted preview of the selected file.

Reads a window of lines around the selected line and colors it with Pygments.
Files that are too large or not UTF-8 get a one-line placeholder instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import sanitize_terminal_text
from .search.content import MAX_FILE_BYTES, has_binary_extension

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
_FORMATTERS: dict[str, TerminalFormatter] = {}


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Return ANSI-colored ``source`` using a lexer picked from ``path``."""
    try:
        lexer = get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    return highlight(source, lexer, _formatter_for_style(style))


def preview_window(total_lines: int, focus_line: int, height: int) -> tuple[int, int]:
    """Return the 0-based ``[start, end)`` line window keeping ``focus_line`` visible.

    ``focus_line`` is 1-based; the window is centered on it where possible.
    """
    height = max(1, height)
    if total_lines <= height:
        return 0, total_lines
    focus = max(0, min(total_lines - 1, focus_line - 1))
    start = max(0, min(focus - height // 2, total_lines - height))
    return start, start + height


def build_preview(
    root: Path,
    relative_path: str,
    *,
    focus_line: int = 1,
    height: int,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> list[str]:
    """Return up to ``height`` rendered rows previewing ``relative_path``."""
    path = root / relative_path
    if has_binary_extension(relative_path):
        return ["(binary file)"]
    try:
        if path.stat().st_size > MAX_FILE_BYTES:
            return ["(file too large to preview)"]
        source = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError:
        return ["(not a text file)"]
    except OSError as exc:
        logger.debug("preview failed for %s: %s", path, exc)
        return [f"(unreadable: {exc.strerror or exc})"]

    lines = sanitize_terminal_text(source).splitlines()
    start, end = preview_window(len(lines), focus_line, height)
    window = lines[start:end]
    if no_color or not window:
        return window
    rendered = highlight_source("\n".join(window) + "\n", path, style)
    return rendered.splitlines()[: len(window)]


__all__ = ["DEFAULT_STYLE", "build_preview", "highlight_source", "preview_window"]
