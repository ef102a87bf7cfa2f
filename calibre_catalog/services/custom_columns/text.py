"""Normalized string columns: text, series and enumeration.

Values live in ``custom_column_<id>(id, value)``; books reference them via
``books_custom_column_<id>_link(book, value[, extra])``.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import bindparam, func, select

from calibre_catalog.db.schema import books, link_table, normalized_value_table
from calibre_catalog.services.custom_columns.base import (
    AggregateValue,
    BooksQuery,
    ColumnValue,
    LinkedColumnType,
    ValueId,
)


class NormalizedColumnType(LinkedColumnType):
    """Shared queries for the string based column types."""

    def _tables(self):
        return normalized_value_table(self.column_id), link_table(self.column_id)

    def load_all_values(self) -> List[AggregateValue]:
        values, link = self._tables()
        stmt = (
            select(values.c.id, values.c.value.label("name"), func.count().label("count"))
            .select_from(values.join(link, values.c.id == link.c.value))
            .group_by(values.c.id, values.c.value)
            .order_by(values.c.value)
        )
        return [
            AggregateValue(int(row["id"]), row["name"], int(row["count"]))
            for row in self.store.query(stmt)
        ]

    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        values, _ = self._tables()
        stmt = select(values.c.id, values.c.value.label("name")).where(values.c.id == bindparam("value"))
        row = self.store.query_one(stmt, {"value": self._coerce_int(value_id)})
        if row is None:
            return None
        return self._value(int(row["id"]), row["name"])

    def resolve_for_book(self, book_id: int) -> ColumnValue:
        values, link = self._tables()
        stmt = (
            select(*self._book_value_columns(values, link))
            .select_from(values.join(link, values.c.id == link.c.value))
            .where(link.c.book == bindparam("book"))
            .order_by(values.c.value)
            .limit(1)
        )
        row = self.store.query_one(stmt, {"book": int(book_id)})
        if row is None:
            return self._unknown()
        return self._value(int(row["id"]), self.format_book_value(row))

    def _book_value_columns(self, values, link) -> list:
        return [values.c.id, values.c.value.label("name")]

    def format_book_value(self, row) -> str:
        return row["name"]

    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        _, link = self._tables()
        stmt = (
            self._books_select()
            .select_from(books.join(link, link.c.book == books.c.id))
            .where(link.c.value == bindparam("value"))
            .order_by(books.c.sort)
        )
        return BooksQuery(stmt, {"value": self._coerce_int(value_id)})


class TextColumnType(NormalizedColumnType):
    datatype = "text"
    unknown_key = "customcolumn.text.unknown"


class SeriesColumnType(NormalizedColumnType):
    datatype = "series"
    unknown_key = "customcolumn.series.unknown"

    def _book_value_columns(self, values, link) -> list:
        return [values.c.id, values.c.value.label("name"), link.c.extra]

    def format_book_value(self, row) -> str:
        return f"{row['name']} [{_format_series_index(row['extra'])}]"

    def description(self) -> str:
        count = self.distinct_value_count()
        return self.localize("customcolumn.description.series", count).format(count)


class EnumerationColumnType(NormalizedColumnType):
    datatype = "enumeration"
    unknown_key = "customcolumn.enum.unknown"

    def description(self) -> str:
        count = self.distinct_value_count()
        return self.localize("customcolumn.description.enum", count).format(count)


def _format_series_index(extra) -> str:
    # calibre stores the index as REAL; 2.0 reads better as "2"
    if isinstance(extra, float) and extra.is_integer():
        return str(int(extra))
    return "" if extra is None else str(extra)


__all__ = [
    "NormalizedColumnType",
    "TextColumnType",
    "SeriesColumnType",
    "EnumerationColumnType",
]
