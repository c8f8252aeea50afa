"""Exception types shared by the search engine and its front end."""

from __future__ import annotations


class LazyfinderError(Exception):
    """Base class for lazyfinder errors."""


class RootDirectoryError(LazyfinderError):
    """The configured root directory is missing or cannot be read.

    This is the only failure that crosses the engine boundary; every search
    operation otherwise degrades to an empty result.
    """

    def __init__(self, root: object, reason: str) -> None:
        super().__init__(f"{root}: {reason}")
        self.root = root
        self.reason = reason


class SearchCancelled(LazyfinderError):
    """A running search was superseded and stopped at a chunk boundary."""
