"""Application configuration accessors.

Centralizes environment variable parsing & defaults. The library path
variable matches the one the calibre-web container already exports so
operators can point both at the same library.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List

APP_NAME = "calibre_catalog"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Custom column browsing for calibre libraries"

DEFAULT_LIBRARY_ROOT = "/app/library"
DEFAULT_LOG_LEVEL = "INFO"
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def library_root() -> str:
    return _raw_env("CALIBRE_LIBRARY_PATH", DEFAULT_LIBRARY_ROOT)  # type: ignore[return-value]


def get_db_path() -> str:
    """Path of calibre's metadata.db.

    Environment Variable: CALIBRE_DB_PATH overrides the full path; otherwise
    `<CALIBRE_LIBRARY_PATH>/metadata.db`.
    """
    raw = _raw_env("CALIBRE_DB_PATH")
    if raw and raw.strip():
        return raw.strip()
    return os.path.join(library_root(), "metadata.db")


def db_read_only() -> bool:
    return env_bool("CATALOG_DB_READ_ONLY", default=True)


def log_level_name() -> str:
    return _raw_env("CATALOG_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


def browse_columns() -> List[str]:
    """Lookup names of the custom columns shown on the catalog index.

    Environment Variable: CATALOG_CUSTOM_COLUMNS (comma separated, e.g.
    "genre,read,mz_price"). Empty or unset means no custom columns.
    """
    raw = _raw_env("CATALOG_CUSTOM_COLUMNS", "") or ""
    out: List[str] = []
    for part in raw.split(","):
        cleaned = part.strip()
        if cleaned and cleaned not in out:
            out.append(cleaned)
    return out


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "read_only": db_read_only(),
        "log_level": log_level_name(),
        "browse_columns": browse_columns(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "env_bool",
    "library_root",
    "get_db_path",
    "db_read_only",
    "log_level_name",
    "browse_columns",
    "metadata",
    "summarize_runtime_config",
]
