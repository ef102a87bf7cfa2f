"""Catalog database engine management.

Single lazily created SQLAlchemy engine bound to calibre's metadata.db.
The catalog never writes; by default the SQLite file is opened with
`mode=ro` so a misbehaving query cannot touch the library.
"""
from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from calibre_catalog import config as app_config
from calibre_catalog.utils.logging import get_logger

_engine: Optional[Engine] = None
_LOCK = threading.Lock()

LOG = get_logger("db")


class CatalogUnavailableError(RuntimeError):
    """Raised when calibre's metadata.db cannot be located."""


def _engine_url(db_path: str, read_only: bool) -> str:
    if read_only:
        return f"sqlite:///file:{db_path}?mode=ro&uri=true"
    return f"sqlite:///{db_path}"


def init_engine_once() -> None:
    global _engine
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = os.path.abspath(app_config.get_db_path())
        if not os.path.isfile(db_path):
            raise CatalogUnavailableError(f"calibre metadata.db not found: {db_path}")
        read_only = app_config.db_read_only()
        LOG.info("Initializing catalog engine at %s (read_only=%s)", db_path, read_only)
        _engine = create_engine(_engine_url(db_path, read_only), future=True)


def get_engine() -> Engine:
    if _engine is None:
        init_engine_once()
    return _engine  # type: ignore[return-value]


@contextmanager
def catalog_connection() -> Iterator[Connection]:
    with get_engine().connect() as conn:
        yield conn


def reset_for_tests() -> None:
    global _engine
    with _LOCK:
        if _engine is not None:
            _engine.dispose()
        _engine = None


__all__ = [
    "CatalogUnavailableError",
    "init_engine_once",
    "get_engine",
    "catalog_connection",
    "reset_for_tests",
]
