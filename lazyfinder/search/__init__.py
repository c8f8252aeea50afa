"""Search engine package exports.

Combines directory listing, caches, fuzzy ranking and content search behind
one import surface.
"""

from __future__ import annotations

from .content import ContentSearchCoordinator, SearchResult, scan_file
from .engine import SearchEngine
from .file_cache import FileListCache
from .fuzzy import fuzzy_score, rank_paths
from .lister import DirectoryLister, path_sort_key
from .query_cache import QueryCache

__all__ = [
    "ContentSearchCoordinator",
    "DirectoryLister",
    "FileListCache",
    "QueryCache",
    "SearchEngine",
    "SearchResult",
    "fuzzy_score",
    "path_sort_key",
    "rank_paths",
    "scan_file",
]
