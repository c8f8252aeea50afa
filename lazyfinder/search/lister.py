"""One-shot directory walk producing the sorted relative file list."""

from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path

from ..errors import RootDirectoryError
from ..ignore import IgnoreRules

logger = logging.getLogger(__name__)

MAX_WALK_DEPTH = 10


def path_sort_key(label: str) -> tuple[str, ...]:
    """Order relative paths component by component (``a/b`` before ``a.txt``)."""
    return tuple(label.split("/"))


def to_root_relative(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` as POSIX text, or absolute on failure."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def check_root_directory(root: Path) -> None:
    """Raise ``RootDirectoryError`` unless ``root`` is a listable directory."""
    if not root.exists():
        raise RootDirectoryError(root, "directory does not exist")
    if not root.is_dir():
        raise RootDirectoryError(root, "not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise RootDirectoryError(root, exc.strerror or str(exc)) from exc


class DirectoryLister:
    """Walk ``root`` honoring ignore files, including hidden entries.

    Traversal is capped at ``max_depth`` levels below the root. Unreadable
    subdirectories are skipped; only an unreadable root is an error.
    """

    def __init__(self, root: Path, max_depth: int = MAX_WALK_DEPTH) -> None:
        self.root = root
        self.max_depth = max(1, max_depth)
        self._count_lock = threading.Lock()
        self.traversal_count = 0

    def list(self) -> list[str]:
        check_root_directory(self.root)
        with self._count_lock:
            self.traversal_count += 1

        started = time.monotonic()
        files: list[str] = []
        rules_by_dir: dict[str, IgnoreRules] = {"": IgnoreRules.for_root(self.root)}

        def on_walk_error(exc: OSError) -> None:
            logger.debug("skipping unreadable entry %s: %s", exc.filename, exc.strerror)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_walk_error):
            base = Path(dirpath)
            rel_dir = to_root_relative(base, self.root)
            if rel_dir == ".":
                rel_dir = ""
            rules = rules_by_dir.pop(rel_dir, None)
            if rules is None:
                dirnames[:] = []
                continue
            depth = 0 if not rel_dir else rel_dir.count("/") + 1

            kept_dirs: list[str] = []
            if depth + 1 < self.max_depth:
                for name in dirnames:
                    child_rel = f"{rel_dir}/{name}" if rel_dir else name
                    if rules.is_ignored(child_rel, is_dir=True):
                        continue
                    kept_dirs.append(name)
                    rules_by_dir[child_rel] = rules.for_directory(base / name, child_rel)
            dirnames[:] = kept_dirs

            for name in filenames:
                child_rel = f"{rel_dir}/{name}" if rel_dir else name
                if rules.is_ignored(child_rel):
                    continue
                if not (base / name).is_file():
                    continue
                files.append(child_rel)

        files.sort(key=path_sort_key)
        logger.info(
            "listed %d files under %s in %.3fs",
            len(files),
            self.root,
            time.monotonic() - started,
        )
        return files


__all__ = [
    "DirectoryLister",
    "MAX_WALK_DEPTH",
    "check_root_directory",
    "path_sort_key",
    "to_root_relative",
]
