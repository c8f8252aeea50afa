"""Bounded memo of fuzzy-search results keyed by exact query text."""

from __future__ import annotations

import threading

QUERY_CACHE_MAX_ENTRIES = 100


class QueryCache:
    """Query -> ranked path tuple, cleared wholesale when it fills up.

    There is no LRU ordering: storing a new key into a full cache drops every
    existing entry first.
    """

    def __init__(self, max_entries: int = QUERY_CACHE_MAX_ENTRIES) -> None:
        self.max_entries = max(1, max_entries)
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[str, ...]] = {}

    def lookup(self, query: str) -> list[str] | None:
        with self._lock:
            cached = self._entries.get(query)
        return list(cached) if cached is not None else None

    def store(self, query: str, result: list[str]) -> None:
        frozen = tuple(result)
        with self._lock:
            if query not in self._entries and len(self._entries) >= self.max_entries:
                self._entries.clear()
            self._entries[query] = frozen

    def invalidate_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, query: object) -> bool:
        with self._lock:
            return query in self._entries


__all__ = ["QUERY_CACHE_MAX_ENTRIES", "QueryCache"]
