"""Database layer root."""

from .engine import (
    CatalogUnavailableError,
    init_engine_once,
    get_engine,
    catalog_connection,
)
from .store import CatalogStore

__all__ = [
    "CatalogUnavailableError",
    "init_engine_once",
    "get_engine",
    "catalog_connection",
    "CatalogStore",
]
