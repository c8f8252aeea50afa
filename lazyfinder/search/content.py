"""Grep-like content search over the cached file list.

Files are scanned in fixed-size chunks on a shared thread pool. Every scan
holds a slot of the engine-wide open-file limiter while it touches the disk,
and the coordinator checks for cancellation between chunks.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from pathlib import Path

from ..errors import SearchCancelled
from .lister import path_sort_key

logger = logging.getLogger(__name__)

CHUNK_SIZE = 50
MAX_FILE_BYTES = 10_000_000
MAX_TEXT_BYTES = 5_000_000
MAX_LINE_BYTES = 1_000
MAX_MATCHES_PER_FILE = 100
LIMITER_ACQUIRE_TIMEOUT_SECONDS = 30.0
BINARY_EXTENSIONS = frozenset(
    {
        "exe", "dll", "so", "dylib", "bin", "o", "a", "lib", "obj",
        "jpg", "jpeg", "png", "gif", "bmp", "ico", "svg", "webp",
        "mp3", "mp4", "avi", "mkv", "wav", "flac", "ogg",
        "zip", "tar", "gz", "7z", "rar", "pdf", "class", "jar",
    }
)


@dataclass(frozen=True)
class SearchResult:
    """One matching line.

    ``match_start``/``match_end`` are character offsets of the first
    case-insensitive occurrence of the query inside ``line_content``.
    """

    file_path: str
    line_number: int  # 1-based
    line_content: str
    match_start: int
    match_end: int


def result_sort_key(result: SearchResult) -> tuple[tuple[str, ...], int]:
    return path_sort_key(result.file_path), result.line_number


def compile_query(query: str) -> re.Pattern[str]:
    """Compile a literal, case-insensitive matcher for ``query``."""
    return re.compile(re.escape(query), re.IGNORECASE)


def has_binary_extension(path: str) -> bool:
    name = path.rsplit("/", 1)[-1]
    if "." not in name.lstrip("."):
        return False
    return name.rsplit(".", 1)[-1].lower() in BINARY_EXTENSIONS


def _line_too_long(line: str) -> bool:
    if len(line) > MAX_LINE_BYTES:
        return True
    # Cheap char-count bound first; only encode lines that could exceed it.
    return len(line) * 4 > MAX_LINE_BYTES and len(line.encode("utf-8")) > MAX_LINE_BYTES


def scan_file(full_path: Path, relative_path: str, pattern: re.Pattern[str]) -> list[SearchResult]:
    """Return up to ``MAX_MATCHES_PER_FILE`` hits in one file.

    Unreadable, oversized, binary-typed and non-UTF-8 files yield no results.
    """
    try:
        size = full_path.stat().st_size
    except OSError:
        return []
    if size > MAX_FILE_BYTES:
        return []
    if has_binary_extension(relative_path):
        return []

    try:
        data = full_path.read_bytes()
    except OSError:
        return []
    if len(data) > MAX_TEXT_BYTES:
        return []
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return []

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    results: list[SearchResult] = []
    for idx, line in enumerate(lines):
        if line.endswith("\r"):
            line = line[:-1]
        if _line_too_long(line):
            continue
        match = pattern.search(line)
        if match is None:
            continue
        results.append(
            SearchResult(
                file_path=relative_path,
                line_number=idx + 1,
                line_content=line,
                match_start=match.start(),
                match_end=match.end(),
            )
        )
        if len(results) >= MAX_MATCHES_PER_FILE:
            break
    return results


class ContentSearchCoordinator:
    """Fan content scans out over a thread pool, one chunk at a time."""

    def __init__(
        self,
        root: Path,
        get_files: Callable[[], list[str]],
        executor: Executor,
        limiter: threading.Semaphore,
        *,
        chunk_size: int = CHUNK_SIZE,
        acquire_timeout: float = LIMITER_ACQUIRE_TIMEOUT_SECONDS,
        is_closed: Callable[[], bool] = lambda: False,
    ) -> None:
        self.root = root
        self._get_files = get_files
        self._executor = executor
        self._limiter = limiter
        self.chunk_size = max(1, chunk_size)
        self.acquire_timeout = acquire_timeout
        self._is_closed = is_closed

    def _scan_with_limit(self, relative_path: str, pattern: re.Pattern[str]) -> list[SearchResult]:
        if self._is_closed():
            return []
        if not self._limiter.acquire(timeout=self.acquire_timeout):
            logger.debug("open-file limiter unavailable, skipping %s", relative_path)
            return []
        try:
            if self._is_closed():
                return []
            return scan_file(self.root / relative_path, relative_path, pattern)
        finally:
            self._limiter.release()

    def _scan_chunk(self, chunk: list[str], pattern: re.Pattern[str]) -> list[SearchResult]:
        futures: list[tuple[str, Future[list[SearchResult]]]] = []
        for relative_path in chunk:
            try:
                futures.append((relative_path, self._executor.submit(self._scan_with_limit, relative_path, pattern)))
            except RuntimeError:
                # Executor shut down underneath us; remaining files are abandoned.
                logger.debug("scan pool closed, abandoning %d files", len(chunk) - len(futures))
                break

        out: list[SearchResult] = []
        for relative_path, future in futures:
            try:
                out.extend(future.result())
            except Exception as exc:
                logger.debug("content scan failed for %s: %s", relative_path, exc)
        return out

    def search(
        self,
        query: str,
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[SearchResult]:
        """Search every listed file for ``query``, ordered by path then line.

        ``should_cancel`` is polled before each chunk; when it reports true the
        search stops with ``SearchCancelled``.
        """
        if not query:
            return []
        pattern = compile_query(query)
        files = self._get_files()

        results: list[SearchResult] = []
        for start in range(0, len(files), self.chunk_size):
            if should_cancel is not None and should_cancel():
                raise SearchCancelled(query)
            results.extend(self._scan_chunk(files[start : start + self.chunk_size], pattern))

        # Completion order across files is arbitrary, so always re-sort.
        results.sort(key=result_sort_key)
        return results


__all__ = [
    "BINARY_EXTENSIONS",
    "CHUNK_SIZE",
    "ContentSearchCoordinator",
    "MAX_FILE_BYTES",
    "MAX_LINE_BYTES",
    "MAX_MATCHES_PER_FILE",
    "MAX_TEXT_BYTES",
    "SearchResult",
    "compile_query",
    "has_binary_extension",
    "result_sort_key",
    "scan_file",
]
