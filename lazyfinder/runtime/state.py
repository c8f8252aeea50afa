from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..search.content import SearchResult
from .pagination import DEFAULT_PAGE_SIZE, PaginationView

MODE_FILES = "files"
MODE_CONTENT = "content"
MODE_HELP = "help"

INPUT_NORMAL = "normal"
INPUT_EDITING = "editing"


@dataclass
class SearchSession:
    """Interactive state owned by the loop thread; never shared with workers."""

    root: Path
    page_size: int = DEFAULT_PAGE_SIZE
    mode: str = MODE_FILES
    input_mode: str = INPUT_NORMAL
    query: str = ""
    cursor: int = 0
    selected_index: int = 0
    scroll_offset: int = 0
    is_searching: bool = False
    show_preview: bool = True
    status_message: str = ""
    dirty: bool = True
    file_view: PaginationView[str] = field(init=False)
    content_view: PaginationView[SearchResult] = field(init=False)
    applied_queries: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.file_view = PaginationView(self.page_size)
        self.content_view = PaginationView(self.page_size)

    @property
    def editing(self) -> bool:
        return self.input_mode == INPUT_EDITING

    def active_view(self) -> PaginationView | None:
        if self.mode == MODE_FILES:
            return self.file_view
        if self.mode == MODE_CONTENT:
            return self.content_view
        return None

    def reset_selection(self) -> None:
        self.selected_index = 0
        self.scroll_offset = 0
        self.dirty = True
