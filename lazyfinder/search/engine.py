"""Explicitly owned search engine instance.

Holds the root directory, the file-list and query caches, the scan thread
pool, and the process-wide open-file limiter. Construct one per root and pass
it to whichever component needs it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .content import CHUNK_SIZE, ContentSearchCoordinator, SearchResult
from .file_cache import DEFAULT_CACHE_SECONDS, FileListCache
from .fuzzy import rank_paths
from .lister import MAX_WALK_DEPTH, DirectoryLister, check_root_directory
from .query_cache import QUERY_CACHE_MAX_ENTRIES, QueryCache

logger = logging.getLogger(__name__)

MAX_OPEN_FILES = 100
DEFAULT_SCAN_WORKERS = 16


class SearchEngine:
    """Filename and content search over one root directory.

    ``list``, ``fuzzy_search`` and ``search_content`` are safe to call from
    several threads at once. Only construction can fail (``RootDirectoryError``);
    searches always return a result list, possibly empty.
    """

    def __init__(
        self,
        root: Path,
        *,
        cache_seconds: float = DEFAULT_CACHE_SECONDS,
        query_cache_max: int = QUERY_CACHE_MAX_ENTRIES,
        max_open_files: int = MAX_OPEN_FILES,
        scan_workers: int = DEFAULT_SCAN_WORKERS,
        max_depth: int = MAX_WALK_DEPTH,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        resolved = Path(root).expanduser().resolve()
        check_root_directory(resolved)
        self.root = resolved
        self.lister = DirectoryLister(resolved, max_depth=max_depth)
        self.file_cache = FileListCache(self.lister.list, cache_seconds=cache_seconds)
        self.query_cache = QueryCache(query_cache_max)
        self._limiter = threading.BoundedSemaphore(max(1, max_open_files))
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, scan_workers),
            thread_name_prefix="lazyfinder-scan",
        )
        self._closed = threading.Event()
        self._generation = 0
        self._generation_lock = threading.Lock()
        self.content = ContentSearchCoordinator(
            resolved,
            self.file_cache.get_files,
            self._executor,
            self._limiter,
            chunk_size=chunk_size,
            is_closed=self._closed.is_set,
        )

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def list(self) -> list[str]:
        """Return the (possibly cached) sorted relative file list."""
        return self.file_cache.get_files()

    def fuzzy_search(self, query: str) -> list[str]:
        """Return files ranked by fuzzy score; empty query lists everything."""
        if not query:
            return self.list()
        cached = self.query_cache.lookup(query)
        if cached is not None:
            logger.debug("query cache hit for %r", query)
            return cached
        with self._generation_lock:
            generation = self._generation
        ranked = rank_paths(query, self.list())
        with self._generation_lock:
            # An invalidation during ranking makes this result stale.
            if generation == self._generation:
                self.query_cache.store(query, ranked)
        return ranked

    def search_content(
        self,
        query: str,
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[SearchResult]:
        return self.content.search(query, should_cancel=should_cancel)

    def invalidate_caches(self) -> None:
        """Drop the file list and every memoized fuzzy result."""
        with self._generation_lock:
            self._generation += 1
            self.file_cache.invalidate()
            self.query_cache.invalidate_all()
        logger.info("caches invalidated for %s", self.root)

    def close(self) -> None:
        """Stop accepting scan work; in-flight scans finish with no results."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> SearchEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["DEFAULT_SCAN_WORKERS", "MAX_OPEN_FILES", "SearchEngine"]
