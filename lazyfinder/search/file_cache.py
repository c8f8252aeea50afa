"""Time-to-live cache around the directory lister."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SECONDS = 30.0


@dataclass(frozen=True)
class CachedFileList:
    """Published file-list snapshot plus its load timestamp."""

    files: tuple[str, ...]
    loaded_at: float


class FileListCache:
    """Single-snapshot cache; readers always get a private list copy.

    The snapshot reference is swapped under a lock, so concurrent readers see
    either the previous or the fresh list, never a partially built one.
    """

    def __init__(
        self,
        list_files: Callable[[], list[str]],
        cache_seconds: float = DEFAULT_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._list_files = list_files
        self.cache_seconds = cache_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: CachedFileList | None = None

    def get_files(self) -> list[str]:
        with self._lock:
            snapshot = self._snapshot
        now = self._clock()
        if snapshot is not None and now - snapshot.loaded_at < self.cache_seconds:
            return list(snapshot.files)

        logger.debug("file list cache miss, walking")
        files = tuple(self._list_files())
        fresh = CachedFileList(files=files, loaded_at=self._clock())
        with self._lock:
            self._snapshot = fresh
        return list(files)

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None

    def snapshot_age(self) -> float | None:
        """Return seconds since the current snapshot was loaded, if any."""
        with self._lock:
            snapshot = self._snapshot
        if snapshot is None:
            return None
        return max(0.0, self._clock() - snapshot.loaded_at)


__all__ = ["CachedFileList", "DEFAULT_CACHE_SECONDS", "FileListCache"]
