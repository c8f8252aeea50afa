"""Full-screen ANSI frame rendering.

Builds header, query prompt, result list (with optional preview pane), and
the status row from ``App`` state. Output is one string written per frame.
"""

from __future__ import annotations

from .ansi import clip_ansi_line, display_width, pad_ansi_line, sanitize_terminal_text
from .preview import DEFAULT_STYLE, build_preview
from .runtime.app import App
from .runtime.state import INPUT_EDITING, MODE_CONTENT, MODE_FILES, MODE_HELP
from .search.content import SearchResult

RESET = "\033[0m"
CHROME_ROWS = 3
PREVIEW_MIN_COLUMNS = 100
PREVIEW_SEPARATOR = "│"
STATUS_HINTS = "Tab: mode  /: search  r: refresh  ?: help  q: quit"

MODE_TITLES = {MODE_FILES: "File Browser", MODE_CONTENT: "Content Search", MODE_HELP: "Help"}
MODE_COLORS = {MODE_FILES: "\033[32m", MODE_CONTENT: "\033[34m", MODE_HELP: "\033[33m"}
MODE_TAGS = {MODE_FILES: "[FILES]", MODE_CONTENT: "[SEARCH]", MODE_HELP: "[HELP]"}

HELP_LINES: tuple[str, ...] = (
    "\033[1;33mNavigation:\033[0m",
    "  Up/k, Down/j   move selection",
    "  PgUp/PgDn      move by 10 rows",
    "  Home/End       first/last row of the page",
    "  n/p, g/G       next/previous page, first/last page",
    "",
    "\033[1;33mSearch:\033[0m",
    "  /              edit the query (file search is live)",
    "  Enter          run the search for the current mode",
    "  Esc            stop editing",
    "",
    "\033[1;33mModes:\033[0m",
    "  Tab            switch between file and content search",
    "  h/F1/?         toggle help",
    "  r              refresh the file list",
    "  v              toggle the preview pane",
    "",
    "\033[1;33mGeneral:\033[0m",
    "  q              quit",
)


def list_rows_for_height(height: int) -> int:
    """Return rows available to the result list for a terminal ``height``."""
    return max(1, height - CHROME_ROWS)


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def format_content_result(result: SearchResult, no_color: bool = False) -> str:
    """Render ``path:line text`` with the matched span emphasized."""
    line = result.line_content
    before = sanitize_terminal_text(line[: result.match_start])
    matched = sanitize_terminal_text(line[result.match_start : result.match_end])
    after = sanitize_terminal_text(line[result.match_end :])
    location = f"{result.file_path}:{result.line_number} "
    if no_color:
        return f"{location}{before}{matched}{after}"
    return f"\033[36m{location}{RESET}{before}\033[1;33m{matched}{RESET}{after}"


def _header_row(app: App, no_color: bool) -> str:
    session = app.session
    text = f" {MODE_TITLES[session.mode]} | Directory: {session.root}"
    if no_color:
        return text
    return f"{MODE_COLORS[session.mode]}\033[1m{text}{RESET}"


def _query_row(app: App, no_color: bool) -> str:
    session = app.session
    prefix = "/> " if session.mode == MODE_CONTENT else "p> "
    query = sanitize_terminal_text(session.query)
    if session.input_mode != INPUT_EDITING:
        if not query:
            hint = "press / to search, Enter to run"
            return prefix + (hint if no_color else f"\033[2m{hint}{RESET}")
        return prefix + query
    cursor = min(session.cursor, len(query))
    under = query[cursor] if cursor < len(query) else " "
    return f"{prefix}{query[:cursor]}\033[7m{under}{RESET}{query[cursor + 1 :]}"


def _list_rows(app: App, rows: int, width: int, no_color: bool) -> list[str]:
    session = app.session
    if session.mode == MODE_HELP:
        help_rows = [line if not no_color else line.replace("\033[1;33m", "").replace(RESET, "") for line in HELP_LINES]
        return help_rows[:rows]

    view = session.active_view()
    items = view.visible if view is not None else []
    out: list[str] = []
    for offset in range(rows):
        idx = session.scroll_offset + offset
        if idx >= len(items):
            break
        item = items[idx]
        if isinstance(item, SearchResult):
            text = format_content_result(item, no_color=no_color)
        else:
            text = sanitize_terminal_text(str(item))
        text = pad_ansi_line(text, width)
        out.append(selected_with_ansi(text) if idx == session.selected_index else text)
    return out


def _preview_rows(app: App, rows: int, style: str, no_color: bool) -> list[str]:
    result = app.current_content_result()
    if result is not None:
        target, line = result.file_path, result.line_number
    else:
        target, line = app.current_file(), 1
    if target is None:
        return []
    return build_preview(app.session.root, target, focus_line=line, height=rows, style=style, no_color=no_color)


def _status_row(app: App, width: int, no_color: bool) -> str:
    session = app.session
    input_tag = "EDITING" if session.input_mode == INPUT_EDITING else "NORMAL"
    text = f"{MODE_TAGS[session.mode]} {input_tag} | {sanitize_terminal_text(app.status_text())}"
    usable = max(1, width - 1)
    # Key hints only when they fit beside the status.
    used = display_width(text)
    if used + 2 + len(STATUS_HINTS) <= usable:
        text += " " * (usable - used - len(STATUS_HINTS)) + STATUS_HINTS
    text = clip_ansi_line(text, usable)
    return text if no_color else f"\033[2m{text}{RESET}"


def render_frame(
    app: App,
    width: int,
    height: int,
    *,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Return the escape-sequence string that redraws the whole screen."""
    width = max(1, width)
    rows = list_rows_for_height(height)
    session = app.session

    show_preview = session.show_preview and session.mode != MODE_HELP and width >= PREVIEW_MIN_COLUMNS
    list_width = width * 45 // 100 if show_preview else width
    list_rows = _list_rows(app, rows, list_width, no_color)
    preview_rows = _preview_rows(app, rows, style, no_color) if show_preview else []

    frame_rows: list[str] = [_header_row(app, no_color), _query_row(app, no_color)]
    for offset in range(rows):
        left = list_rows[offset] if offset < len(list_rows) else ""
        if show_preview:
            right = preview_rows[offset] if offset < len(preview_rows) else ""
            left = pad_ansi_line(left, list_width)
            frame_rows.append(f"{left}{RESET}{PREVIEW_SEPARATOR}{clip_ansi_line(right, width - list_width - 1)}{RESET}")
        else:
            frame_rows.append(left)
    frame_rows.append(_status_row(app, width, no_color))

    out = ["\033[H"]
    for idx, row in enumerate(frame_rows):
        out.append(clip_ansi_line(row, width))
        out.append(RESET + "\033[K")
        if idx < len(frame_rows) - 1:
            out.append("\r\n")
    return "".join(out)


__all__ = [
    "HELP_LINES",
    "format_content_result",
    "list_rows_for_height",
    "render_frame",
    "selected_with_ansi",
]
