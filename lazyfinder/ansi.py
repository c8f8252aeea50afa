"""Column arithmetic for styled terminal rows.

Result rows mix SGR color codes with file text that may contain tabs and
wide characters; these helpers measure and cut such rows by screen cells.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_UNSAFE_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when drawn at column ``col`` (tabs depend on ``col``)."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _cells(text: str) -> Iterator[tuple[str, int, int]]:
    """Yield ``(chunk, start_col, width)``; escape sequences have width 0."""
    col = 0
    pos = 0
    while pos < len(text):
        escape = ANSI_ESCAPE_RE.match(text, pos) if text[pos] == "\x1b" else None
        if escape is not None:
            yield escape.group(0), col, 0
            pos = escape.end()
            continue
        width = char_display_width(text[pos], col)
        yield text[pos], col, width
        col += width
        pos += 1


def sanitize_terminal_text(source: str) -> str:
    """Show control bytes as ``\\xNN`` so file text cannot drive the terminal."""
    return _UNSAFE_CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def display_width(text: str) -> int:
    return sum(width for _, _, width in _cells(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` cells, keeping every escape it passes.

    Tabs become spaces so the kept width is exact.
    """
    if max_cols <= 0:
        return ""
    out: list[str] = []
    for chunk, col, width in _cells(text):
        if col + width > max_cols:
            break
        out.append(" " * width if chunk == "\t" else chunk)
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` cells, then right-pad it with spaces."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


__all__ = [
    "ANSI_ESCAPE_RE",
    "TAB_STOP",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "pad_ansi_line",
    "sanitize_terminal_text",
]
