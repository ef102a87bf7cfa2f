"""Lightweight table constructs for calibre's metadata.db.

calibre owns the schema; we only describe the columns we read. Per-column
table names are derived from the integer column id, never from request data.
"""
from __future__ import annotations

from sqlalchemy import column, table
from sqlalchemy.sql.expression import TableClause

books = table(
    "books",
    column("id"),
    column("title"),
    column("sort"),
    column("timestamp"),
    column("path"),
)

custom_columns = table(
    "custom_columns",
    column("id"),
    column("label"),
    column("name"),
    column("datatype"),
    column("display"),
    column("is_multiple"),
    column("normalized"),
)


def value_table_name(column_id: int) -> str:
    return f"custom_column_{int(column_id)}"


def link_table_name(column_id: int) -> str:
    return f"books_custom_column_{int(column_id)}_link"


def normalized_value_table(column_id: int) -> TableClause:
    """Value table of a normalized column (text, series, enumeration, rating)."""
    return table(value_table_name(column_id), column("id"), column("value"))


def direct_value_table(column_id: int) -> TableClause:
    """Value table of a single-valued column (int, float, datetime, bool)."""
    return table(value_table_name(column_id), column("id"), column("book"), column("value"))


def link_table(column_id: int) -> TableClause:
    return table(link_table_name(column_id), column("id"), column("book"), column("value"), column("extra"))


__all__ = [
    "books",
    "custom_columns",
    "value_table_name",
    "link_table_name",
    "normalized_value_table",
    "direct_value_table",
    "link_table",
]
