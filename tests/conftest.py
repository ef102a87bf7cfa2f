"""Shared fixtures: a real calibre-shaped metadata.db in a temp directory."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

import pytest
from sqlalchemy import create_engine, text

from calibre_catalog.db.engine import reset_for_tests
from calibre_catalog.db.store import CatalogStore

BASE_SCHEMA = [
    """CREATE TABLE books (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL DEFAULT 'Unknown',
        sort TEXT,
        timestamp TIMESTAMP,
        path TEXT NOT NULL DEFAULT ''
    )""",
    """CREATE TABLE custom_columns (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        label TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        datatype TEXT NOT NULL,
        mark_for_delete BOOL DEFAULT 0 NOT NULL,
        editable BOOL DEFAULT 1 NOT NULL,
        display TEXT DEFAULT '{}' NOT NULL,
        is_multiple BOOL DEFAULT 0 NOT NULL,
        normalized BOOL NOT NULL
    )""",
]

NORMALIZED = {"text", "series", "enumeration", "rating", "comments"}
DIRECT_TYPES = {"int": "INTEGER", "float": "REAL", "bool": "BOOL", "datetime": "TIMESTAMP"}


class CalibreLibrary:
    """Minimal writer for the tables the catalog reads."""

    def __init__(self, path):
        self.path = str(path)
        self.engine = create_engine(f"sqlite:///{self.path}")
        with self.engine.begin() as conn:
            for stmt in BASE_SCHEMA:
                conn.execute(text(stmt))

    def _exec(self, sql: str, params: Optional[Dict[str, Any]] = None) -> None:
        with self.engine.begin() as conn:
            conn.execute(text(sql), params or {})

    def _insert(self, sql: str, params: Dict[str, Any]) -> int:
        with self.engine.begin() as conn:
            return int(conn.execute(text(sql), params).lastrowid)

    def _scalar(self, sql: str, params: Dict[str, Any]) -> Any:
        with self.engine.begin() as conn:
            return conn.execute(text(sql), params).scalar()

    def add_book(self, title: str) -> int:
        return self._insert("INSERT INTO books (title, sort) VALUES (:t, :t)", {"t": title})

    def add_column(self, label: str, datatype: str, name: Optional[str] = None, display: Optional[dict] = None) -> int:
        normalized = datatype in NORMALIZED
        column_id = self._insert(
            "INSERT INTO custom_columns (label, name, datatype, display, normalized) "
            "VALUES (:label, :name, :datatype, :display, :normalized)",
            {
                "label": label,
                "name": name or label.title(),
                "datatype": datatype,
                "display": json.dumps(display or {}),
                "normalized": 1 if normalized else 0,
            },
        )
        if datatype in DIRECT_TYPES:
            self._exec(
                f"CREATE TABLE custom_column_{column_id} ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, book INTEGER, "
                f"value {DIRECT_TYPES[datatype]} NOT NULL, UNIQUE(book))"
            )
        elif normalized:
            value_type = "INTEGER" if datatype == "rating" else "TEXT"
            self._exec(
                f"CREATE TABLE custom_column_{column_id} ("
                f"id INTEGER PRIMARY KEY AUTOINCREMENT, value {value_type} NOT NULL UNIQUE)"
            )
            extra = ", extra REAL" if datatype == "series" else ""
            self._exec(
                f"CREATE TABLE books_custom_column_{column_id}_link ("
                f"id INTEGER PRIMARY KEY AUTOINCREMENT, book INTEGER NOT NULL, value INTEGER NOT NULL{extra}, "
                "UNIQUE(book, value))"
            )
        return column_id

    def value_id(self, column_id: int, value: Any) -> int:
        table = f"custom_column_{column_id}"
        existing = self._scalar(f"SELECT id FROM {table} WHERE value = :v", {"v": value})
        if existing is not None:
            return int(existing)
        return self._insert(f"INSERT INTO {table} (value) VALUES (:v)", {"v": value})

    def link_value(self, column_id: int, book_id: int, value: Any, extra: Optional[float] = None) -> int:
        value_id = self.value_id(column_id, value)
        if extra is None:
            self._exec(
                f"INSERT INTO books_custom_column_{column_id}_link (book, value) VALUES (:b, :v)",
                {"b": book_id, "v": value_id},
            )
        else:
            self._exec(
                f"INSERT INTO books_custom_column_{column_id}_link (book, value, extra) VALUES (:b, :v, :e)",
                {"b": book_id, "v": value_id, "e": extra},
            )
        return value_id

    def set_value(self, column_id: int, book_id: int, value: Any) -> None:
        self._exec(
            f"INSERT INTO custom_column_{column_id} (book, value) VALUES (:b, :v)",
            {"b": book_id, "v": value},
        )

    def dispose(self) -> None:
        self.engine.dispose()


@pytest.fixture
def library(tmp_path, monkeypatch):
    db_path = tmp_path / "metadata.db"
    reset_for_tests()
    monkeypatch.setenv("CALIBRE_DB_PATH", str(db_path))
    monkeypatch.delenv("CATALOG_CUSTOM_COLUMNS", raising=False)
    lib = CalibreLibrary(db_path)
    yield lib
    reset_for_tests()
    lib.dispose()


@pytest.fixture
def store(library):
    return CatalogStore()
