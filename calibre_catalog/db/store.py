"""Read-only query interface over the catalog database."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.sql import Executable

from calibre_catalog.db.engine import get_engine


class CatalogStore:
    """Executes SQLAlchemy statements and returns rows as mappings.

    Each call opens a short-lived connection; nothing is committed.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def query(self, statement: Executable, params: Optional[Mapping[str, Any]] = None) -> List[RowMapping]:
        with self.engine.connect() as conn:
            result = conn.execute(statement, dict(params) if params else None)
            return list(result.mappings().all())

    def query_one(self, statement: Executable, params: Optional[Mapping[str, Any]] = None) -> Optional[RowMapping]:
        with self.engine.connect() as conn:
            result = conn.execute(statement, dict(params) if params else None)
            return result.mappings().first()


__all__ = ["CatalogStore"]
