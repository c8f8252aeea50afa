"""Fixed-size paging over an unbounded result list."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 1_000


class PaginationView(Generic[T]):
    """Full result set plus the currently visible page slice.

    Page navigation never wraps; every navigation call recomputes the slice
    and reports whether the page index changed.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.page_size = max(1, page_size)
        self.all_results: list[T] = []
        self.current_page = 0
        self.total_pages = 0
        self.visible: list[T] = []

    @property
    def total_count(self) -> int:
        return len(self.all_results)

    @property
    def page_start(self) -> int:
        return self.current_page * self.page_size

    def set_results(self, results: Sequence[T]) -> None:
        self.all_results = list(results)
        count = len(self.all_results)
        self.total_pages = -(-count // self.page_size)
        self.current_page = max(0, min(self.current_page, self.total_pages - 1))
        self._recompute_slice()

    def _recompute_slice(self) -> None:
        start = self.page_start
        end = min(self.total_count, start + self.page_size)
        self.visible = self.all_results[start:end]

    def _go_to(self, page: int) -> bool:
        target = max(0, min(page, self.total_pages - 1))
        changed = target != self.current_page
        self.current_page = target
        self._recompute_slice()
        return changed

    def next_page(self) -> bool:
        return self._go_to(self.current_page + 1)

    def prev_page(self) -> bool:
        return self._go_to(self.current_page - 1)

    def first_page(self) -> bool:
        return self._go_to(0)

    def last_page(self) -> bool:
        return self._go_to(self.total_pages - 1)

    def status_text(self, label: str) -> str:
        """Describe the visible range, e.g. ``Files: 1-1000 of 4213 (Page 1/5)``."""
        if not self.all_results:
            return f"{label}: 0 results"
        first = self.page_start + 1
        last = self.page_start + len(self.visible)
        return (
            f"{label}: {first}-{last} of {self.total_count} "
            f"(Page {self.current_page + 1}/{self.total_pages})"
        )


__all__ = ["DEFAULT_PAGE_SIZE", "PaginationView"]
