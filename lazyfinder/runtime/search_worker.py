"""Background search worker with latest-request-wins semantics."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from queue import Empty, Queue

from ..errors import SearchCancelled
from ..search.engine import SearchEngine

logger = logging.getLogger(__name__)

SEARCH_KIND_FILES = "files"
SEARCH_KIND_CONTENT = "content"


@dataclass(frozen=True)
class SearchRequest:
    """One search job; ids grow monotonically across all kinds."""

    request_id: int
    kind: str
    query: str
    refresh: bool = False


@dataclass(frozen=True)
class SearchOutcome:
    """Completed search payload delivered back to the interactive loop."""

    request: SearchRequest
    results: list
    elapsed: float
    error: str | None = None


class SearchWorker:
    """Run searches off the interactive thread, one daemon worker at a time.

    At most one request per kind is pending; scheduling a newer request of the
    same kind replaces the pending one and cancels a running one at its next
    chunk boundary. ``is_current`` lets the consumer drop stale completions.
    """

    def __init__(self, engine: SearchEngine) -> None:
        self._engine = engine
        self._lock = threading.Lock()
        self._pending: dict[str, SearchRequest] = {}
        self._latest: dict[str, int] = {}
        self._running = False
        self._next_request_id = 1
        self._results: Queue[SearchOutcome] = Queue()

    def _take_pending(self) -> SearchRequest | None:
        with self._lock:
            if not self._pending:
                self._running = False
                return None
            kind = min(self._pending, key=lambda key: self._pending[key].request_id)
            return self._pending.pop(kind)

    def _run(self, request: SearchRequest) -> list:
        if request.refresh:
            self._engine.invalidate_caches()
        if request.kind == SEARCH_KIND_CONTENT:
            return self._engine.search_content(
                request.query,
                should_cancel=lambda: not self.is_current(request),
            )
        return self._engine.fuzzy_search(request.query)

    def _worker(self) -> None:
        while True:
            request = self._take_pending()
            if request is None:
                return
            if not self.is_current(request):
                continue

            started = time.monotonic()
            error: str | None = None
            try:
                results = self._run(request)
            except SearchCancelled:
                logger.debug("search %d (%s %r) superseded", request.request_id, request.kind, request.query)
                continue
            except Exception as exc:
                logger.exception("search %d (%s %r) failed", request.request_id, request.kind, request.query)
                results = []
                error = str(exc) or exc.__class__.__name__
            self._results.put(
                SearchOutcome(
                    request=request,
                    results=results,
                    elapsed=time.monotonic() - started,
                    error=error,
                )
            )

    def schedule(self, kind: str, query: str, *, refresh: bool = False) -> int:
        """Queue a search, replacing any pending one of the same kind."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            replaced = self._pending.get(kind)
            self._pending[kind] = SearchRequest(
                request_id=request_id,
                kind=kind,
                query=query,
                refresh=refresh or (replaced is not None and replaced.refresh),
            )
            self._latest[kind] = request_id
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="lazyfinder-search",
            daemon=True,
        )
        worker.start()
        return request_id

    def supersede(self, kind: str) -> None:
        """Mark every earlier request of ``kind`` stale without queueing work."""
        with self._lock:
            self._pending.pop(kind, None)
            self._latest[kind] = self._next_request_id
            self._next_request_id += 1

    def is_current(self, request: SearchRequest) -> bool:
        with self._lock:
            return self._latest.get(request.kind) == request.request_id

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running

    def drain_results(self) -> list[SearchOutcome]:
        """Drain all completed searches, oldest first."""
        out: list[SearchOutcome] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "SEARCH_KIND_CONTENT",
    "SEARCH_KIND_FILES",
    "SearchOutcome",
    "SearchRequest",
    "SearchWorker",
]
