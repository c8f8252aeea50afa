"""Command-line front door for lazyfinder.

Parses CLI options, merges them over the persisted settings, and either
prints file/content matches directly or launches the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import Settings, configure_logging, load_settings
from .errors import RootDirectoryError
from .runtime import run_app
from .search.engine import SearchEngine

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyfinder",
        description="Browse files and search their contents from the terminal.",
    )
    parser.add_argument(
        "-d",
        "--directory",
        default=".",
        help="Directory to browse (default: current directory).",
    )
    parser.add_argument("-p", "--pattern", default=None, help="Initial fuzzy file-name pattern.")
    parser.add_argument("--page-size", type=_positive_int, default=None, help="Results shown per page.")
    parser.add_argument("--style", default=None, help="Pygments style name for the preview pane.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        help="Print the file list (fuzzy-filtered by --pattern) and exit.",
    )
    mode.add_argument("--grep", metavar="QUERY", default=None, help="Print content matches for QUERY and exit.")
    return parser


def _open_engine(root: Path, settings: Settings) -> SearchEngine:
    return SearchEngine(
        root,
        cache_seconds=settings.cache_seconds,
        query_cache_max=settings.query_cache_max,
        max_open_files=settings.max_open_files,
    )


def print_file_list(root: Path, settings: Settings, pattern: str | None) -> None:
    """Write matching relative paths to stdout, one per line."""
    with _open_engine(root, settings) as engine:
        for path in engine.fuzzy_search(pattern or ""):
            sys.stdout.write(path + "\n")


def print_content_matches(root: Path, settings: Settings, query: str) -> None:
    """Write ``path:line:text`` for every content match of ``query``."""
    with _open_engine(root, settings) as engine:
        for result in engine.search_content(query):
            sys.stdout.write(f"{result.file_path}:{result.line_number}:{result.line_content}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run lazyfinder on the chosen directory.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    """
    args = build_parser().parse_args(argv)
    settings = load_settings().with_overrides(
        page_size=args.page_size,
        style=args.style,
        log_file=args.log_file,
    )
    configure_logging(settings.log_file)

    root = Path(args.directory).expanduser()
    if not root.exists():
        raise SystemExit(f"Directory not found: {root}")
    try:
        if args.list:
            print_file_list(root, settings, args.pattern)
        elif args.grep is not None:
            print_content_matches(root, settings, args.grep)
        else:
            run_app(root, settings, initial_pattern=args.pattern, no_color=args.no_color)
    except RootDirectoryError as exc:
        logger.error("cannot open root %s: %s", exc.root, exc.reason)
        raise SystemExit(f"Cannot open directory {exc.root}: {exc.reason}") from exc


if __name__ == "__main__":
    main()
