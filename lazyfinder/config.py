"""Persistent JSON config helpers.

Stores engine tuning and display preferences.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

from .runtime.debounce import DEFAULT_DEBOUNCE_SECONDS
from .runtime.pagination import DEFAULT_PAGE_SIZE
from .search.engine import MAX_OPEN_FILES
from .search.file_cache import DEFAULT_CACHE_SECONDS
from .search.query_cache import QUERY_CACHE_MAX_ENTRIES

APP_NAME = "lazyfinder"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Validated runtime settings; CLI flags override loaded values."""

    page_size: int = DEFAULT_PAGE_SIZE
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    cache_seconds: float = DEFAULT_CACHE_SECONDS
    query_cache_max: int = QUERY_CACHE_MAX_ENTRIES
    max_open_files: int = MAX_OPEN_FILES
    style: str = "monokai"
    show_preview: bool = True
    log_file: Path | None = None

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _positive_int(value: object, default: int) -> int:
    """Accept plain positive integers; booleans and other types fall back."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _nonnegative_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    return float(value)


def load_settings() -> Settings:
    """Build ``Settings`` from the config file, dropping invalid values."""
    data = load_config()
    defaults = Settings()

    style = data.get("style")
    show_preview = data.get("show_preview")
    log_file = data.get("log_file")
    return Settings(
        page_size=_positive_int(data.get("page_size"), defaults.page_size),
        debounce_seconds=_nonnegative_float(data.get("debounce_seconds"), defaults.debounce_seconds),
        cache_seconds=_nonnegative_float(data.get("cache_seconds"), defaults.cache_seconds),
        query_cache_max=_positive_int(data.get("query_cache_max"), defaults.query_cache_max),
        max_open_files=_positive_int(data.get("max_open_files"), defaults.max_open_files),
        style=style.strip() if isinstance(style, str) and style.strip() else defaults.style,
        show_preview=show_preview if isinstance(show_preview, bool) else defaults.show_preview,
        log_file=Path(log_file).expanduser() if isinstance(log_file, str) and log_file else None,
    )


def save_show_preview(show_preview: bool) -> None:
    """Persist preview-pane visibility preference as a boolean."""
    config = load_config()
    config["show_preview"] = bool(show_preview)
    save_config(config)


def configure_logging(log_file: Path | None, level: int = logging.DEBUG) -> logging.Handler | None:
    """Send ``lazyfinder`` logs to ``log_file``.

    The terminal is in raw mode while the app runs, so there is no console
    handler; without a log file the package logger stays silent.
    """
    if log_file is None:
        return None
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(APP_NAME)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler


__all__ = [
    "CONFIG_PATH",
    "Settings",
    "configure_logging",
    "load_config",
    "load_settings",
    "save_config",
    "save_show_preview",
]
