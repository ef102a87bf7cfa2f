"""Integer and float columns: one ``custom_column_<id>(book, value)`` row per book."""
from __future__ import annotations

from abc import abstractmethod
from typing import List, Optional, Union

from sqlalchemy import bindparam, func, select

from calibre_catalog.db.schema import books, direct_value_table
from calibre_catalog.services.custom_columns.base import (
    AggregateValue,
    BooksQuery,
    ColumnType,
    ColumnValue,
    InvalidValueId,
    ValueId,
)

Number = Union[int, float]


class NumericColumnType(ColumnType):
    """The value is its own id; labels are the plain number."""

    def _table(self):
        return direct_value_table(self.column_id)

    @abstractmethod
    def coerce(self, value_id: ValueId) -> Number:
        """Convert a value id (often a URL segment) to the stored number."""

    def format_value(self, value: Number) -> str:
        return str(value)

    def load_all_values(self) -> List[AggregateValue]:
        table = self._table()
        stmt = (
            select(table.c.value.label("id"), func.count().label("count"))
            .group_by(table.c.value)
            .order_by(table.c.value)
        )
        out: List[AggregateValue] = []
        for row in self.store.query(stmt):
            value = self.coerce(row["id"])
            out.append(AggregateValue(value, self.format_value(value), int(row["count"])))
        return out

    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        value = self.coerce(value_id)
        return self._value(value, self.format_value(value))

    def resolve_for_book(self, book_id: int) -> ColumnValue:
        table = self._table()
        stmt = select(table.c.value).where(table.c.book == bindparam("book")).limit(1)
        row = self.store.query_one(stmt, {"book": int(book_id)})
        if row is None or row["value"] is None:
            return self._unknown()
        value = self.coerce(row["value"])
        return self._value(value, self.format_value(value))

    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        table = self._table()
        stmt = (
            self._books_select()
            .select_from(books.join(table, table.c.book == books.c.id))
            .where(table.c.value == bindparam("value"))
            .order_by(books.c.sort)
        )
        return BooksQuery(stmt, {"value": self.coerce(value_id)})


class IntColumnType(NumericColumnType):
    datatype = "int"
    unknown_key = "customcolumn.int.unknown"

    def coerce(self, value_id: ValueId) -> Number:
        return self._coerce_int(value_id)


class FloatColumnType(NumericColumnType):
    datatype = "float"
    unknown_key = "customcolumn.float.unknown"

    def coerce(self, value_id: ValueId) -> Number:
        if isinstance(value_id, bool):
            raise InvalidValueId(f"Invalid value id: {value_id!r}")
        try:
            return float(value_id)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise InvalidValueId(f"Invalid value id: {value_id!r}") from None


__all__ = ["NumericColumnType", "IntColumnType", "FloatColumnType"]
