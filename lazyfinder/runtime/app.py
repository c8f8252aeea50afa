"""Key-command controller tying the session, debounce and search worker together.

All methods run on the interactive loop thread. Searches are handed to the
background worker; completed results are applied in ``tick`` only when they
belong to the newest request of their kind.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..search.content import SearchResult
from ..search.engine import SearchEngine
from .debounce import DEFAULT_DEBOUNCE_SECONDS, DebounceScheduler
from .pagination import DEFAULT_PAGE_SIZE
from .search_worker import SEARCH_KIND_CONTENT, SEARCH_KIND_FILES, SearchOutcome, SearchWorker
from .state import (
    INPUT_EDITING,
    INPUT_NORMAL,
    MODE_CONTENT,
    MODE_FILES,
    MODE_HELP,
    SearchSession,
)

logger = logging.getLogger(__name__)

ROW_JUMP = 10
DEFAULT_VISIBLE_ROWS = 20
VIEW_LABELS = {MODE_FILES: "Files", MODE_CONTENT: "Matches"}


class App:
    """Stateful controller for one interactive session."""

    def __init__(
        self,
        engine: SearchEngine,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        initial_pattern: str | None = None,
        show_preview: bool = True,
        on_preview_toggled: Callable[[bool], None] | None = None,
        worker: SearchWorker | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.session = SearchSession(
            root=engine.root,
            page_size=page_size,
            query=initial_pattern or "",
            show_preview=show_preview,
        )
        self.session.cursor = len(self.session.query)
        self.debounce = DebounceScheduler(debounce_seconds)
        self.worker = worker if worker is not None else SearchWorker(engine)
        self.visible_rows = DEFAULT_VISIBLE_ROWS
        self._on_preview_toggled = on_preview_toggled
        self._clock = clock
        self._in_flight: set[str] = set()

    # searches
    def start(self) -> None:
        """Kick off the initial file listing (filtered by any initial pattern)."""
        self.schedule_search(SEARCH_KIND_FILES, self.session.query)

    def schedule_search(self, kind: str, query: str, *, refresh: bool = False) -> None:
        if kind == SEARCH_KIND_CONTENT and not query:
            self.worker.supersede(kind)
            self._in_flight.discard(kind)
            self.session.is_searching = bool(self._in_flight)
            self.session.content_view.set_results([])
            self.session.applied_queries[kind] = ""
            self.session.reset_selection()
            return
        self.worker.schedule(kind, query, refresh=refresh)
        self._in_flight.add(kind)
        self.session.is_searching = True
        self.session.dirty = True

    def refresh(self) -> None:
        """Drop engine caches and rerun the search behind the active view."""
        session = self.session
        if session.mode == MODE_CONTENT and session.query:
            self.schedule_search(SEARCH_KIND_CONTENT, session.query, refresh=True)
            return
        if session.mode == MODE_FILES:
            query = session.query
        else:
            query = session.applied_queries.get(SEARCH_KIND_FILES, "")
        self.schedule_search(SEARCH_KIND_FILES, query, refresh=True)

    def run_active_search(self) -> None:
        session = self.session
        self.debounce.cancel()
        if session.mode == MODE_FILES:
            self.schedule_search(SEARCH_KIND_FILES, session.query)
        elif session.mode == MODE_CONTENT:
            self.schedule_search(SEARCH_KIND_CONTENT, session.query)

    def _apply_outcome(self, outcome: SearchOutcome) -> None:
        session = self.session
        request = outcome.request
        if not self.worker.is_current(request):
            logger.debug("dropping stale %s result for %r", request.kind, request.query)
            return
        self._in_flight.discard(request.kind)
        view = session.content_view if request.kind == SEARCH_KIND_CONTENT else session.file_view
        view.set_results(outcome.results)
        session.applied_queries[request.kind] = request.query
        session.status_message = f"Search failed: {outcome.error}" if outcome.error else ""
        if session.active_view() is view:
            session.reset_selection()
        session.dirty = True

    def tick(self, now: float | None = None) -> None:
        """Apply finished searches and fire the debounced live file search."""
        now = self._clock() if now is None else now
        for outcome in self.worker.drain_results():
            self._apply_outcome(outcome)
        searching = bool(self._in_flight)
        if searching != self.session.is_searching:
            self.session.is_searching = searching
            self.session.dirty = True

        if self.debounce.should_fire(
            now,
            editing=self.session.editing,
            files_mode=self.session.mode == MODE_FILES,
            searching=self.session.is_searching,
        ):
            self.schedule_search(SEARCH_KIND_FILES, self.session.query)

    # selection
    def _page_len(self) -> int:
        view = self.session.active_view()
        return len(view.visible) if view is not None else 0

    def _adjust_scroll(self) -> None:
        session = self.session
        rows = max(1, self.visible_rows)
        if session.selected_index < session.scroll_offset:
            session.scroll_offset = session.selected_index
        elif session.selected_index >= session.scroll_offset + rows:
            session.scroll_offset = session.selected_index - rows + 1
        session.dirty = True

    def move_selection(self, delta: int) -> None:
        count = self._page_len()
        if count == 0:
            return
        self.session.selected_index = max(0, min(count - 1, self.session.selected_index + delta))
        self._adjust_scroll()

    def select_edge(self, last: bool) -> None:
        self.session.selected_index = max(0, self._page_len() - 1) if last else 0
        self._adjust_scroll()

    def change_page(self, action: str) -> None:
        view = self.session.active_view()
        if view is None:
            return
        getattr(view, action)()
        self.session.reset_selection()

    def current_file(self) -> str | None:
        session = self.session
        if session.mode != MODE_FILES:
            return None
        visible = session.file_view.visible
        if 0 <= session.selected_index < len(visible):
            return visible[session.selected_index]
        return None

    def current_content_result(self) -> SearchResult | None:
        session = self.session
        if session.mode != MODE_CONTENT:
            return None
        visible = session.content_view.visible
        if 0 <= session.selected_index < len(visible):
            return visible[session.selected_index]
        return None

    # modes
    def set_mode(self, mode: str) -> None:
        if self.session.mode == mode:
            return
        self.session.mode = mode
        self.session.reset_selection()

    def toggle_help(self) -> None:
        self.set_mode(MODE_FILES if self.session.mode == MODE_HELP else MODE_HELP)

    def switch_search_mode(self) -> None:
        self.set_mode(MODE_CONTENT if self.session.mode == MODE_FILES else MODE_FILES)

    def toggle_preview(self) -> None:
        self.session.show_preview = not self.session.show_preview
        self.session.dirty = True
        if self._on_preview_toggled is not None:
            self._on_preview_toggled(self.session.show_preview)

    # keys
    def handle_key(self, key: str, now: float | None = None) -> bool:
        """Dispatch one key token; return ``True`` when the app should quit."""
        if not key:
            return False
        now = self._clock() if now is None else now
        if self.session.input_mode == INPUT_EDITING:
            self._handle_editing_key(key, now)
            return False
        return self._handle_normal_key(key)

    def _handle_normal_key(self, key: str) -> bool:
        session = self.session
        if key in {"q", "CTRL_C"}:
            return True
        if key in {"h", "F1", "?"}:
            self.toggle_help()
        elif key == "TAB":
            self.switch_search_mode()
        elif key == "/":
            session.input_mode = INPUT_EDITING
            session.query = ""
            session.cursor = 0
            session.dirty = True
            if session.mode == MODE_HELP:
                self.set_mode(MODE_FILES)
        elif key == "ENTER":
            if session.query:
                self.run_active_search()
        elif key == "r":
            self.refresh()
        elif key == "v":
            self.toggle_preview()
        elif key in {"UP", "k"}:
            self.move_selection(-1)
        elif key in {"DOWN", "j"}:
            self.move_selection(1)
        elif key == "PAGE_UP":
            self.move_selection(-ROW_JUMP)
        elif key == "PAGE_DOWN":
            self.move_selection(ROW_JUMP)
        elif key == "HOME":
            self.select_edge(last=False)
        elif key == "END":
            self.select_edge(last=True)
        elif key == "n":
            self.change_page("next_page")
        elif key == "p":
            self.change_page("prev_page")
        elif key == "g":
            self.change_page("first_page")
        elif key == "G":
            self.change_page("last_page")
        return False

    def _edited(self, now: float) -> None:
        self.session.dirty = True
        if self.session.mode == MODE_FILES:
            self.debounce.note_edit(now)

    def _handle_editing_key(self, key: str, now: float) -> None:
        session = self.session
        if key == "ENTER":
            session.input_mode = INPUT_NORMAL
            self.run_active_search()
            return
        if key in {"ESC", "CTRL_C"}:
            session.input_mode = INPUT_NORMAL
            self.debounce.cancel()
            session.dirty = True
            return
        if key == "BACKSPACE":
            if session.cursor > 0:
                session.query = session.query[: session.cursor - 1] + session.query[session.cursor :]
                session.cursor -= 1
                self._edited(now)
            return
        if key == "DELETE":
            if session.cursor < len(session.query):
                session.query = session.query[: session.cursor] + session.query[session.cursor + 1 :]
                self._edited(now)
            return
        if key == "CTRL_U":
            if session.query:
                session.query = ""
                session.cursor = 0
                self._edited(now)
            return
        if key == "LEFT":
            session.cursor = max(0, session.cursor - 1)
            session.dirty = True
            return
        if key == "RIGHT":
            session.cursor = min(len(session.query), session.cursor + 1)
            session.dirty = True
            return
        if key == "HOME":
            session.cursor = 0
            session.dirty = True
            return
        if key == "END":
            session.cursor = len(session.query)
            session.dirty = True
            return
        if len(key) == 1 and key.isprintable():
            session.query = session.query[: session.cursor] + key + session.query[session.cursor :]
            session.cursor += 1
            self._edited(now)

    # status
    def status_text(self) -> str:
        session = self.session
        view = session.active_view()
        if view is None:
            text = "Help"
        else:
            text = view.status_text(VIEW_LABELS[session.mode])
        if session.is_searching:
            text += " | Searching..."
        if session.status_message:
            text += f" | {session.status_message}"
        return text


__all__ = ["App", "ROW_JUMP", "VIEW_LABELS"]
