"""Yes/No columns.

Stored one row per book in ``custom_column_<id>(book, value)`` with 0/1;
books without a row are reported under the id -1.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import bindparam, func, literal_column, select

from calibre_catalog.db.schema import books, direct_value_table
from calibre_catalog.services.custom_columns.base import (
    LOG,
    AggregateValue,
    BooksQuery,
    ColumnType,
    ColumnValue,
    ValueId,
)

UNKNOWN = -1
NO = 0
YES = 1

BOOLEAN_NAMES: Dict[int, str] = {
    UNKNOWN: "customcolumn.boolean.unknown",
    NO: "customcolumn.boolean.no",
    YES: "customcolumn.boolean.yes",
}


class BoolColumnType(ColumnType):
    datatype = "bool"
    unknown_key = BOOLEAN_NAMES[UNKNOWN]

    def _table(self):
        return direct_value_table(self.column_id)

    def label(self, value: int) -> str:
        return self.localize(BOOLEAN_NAMES[value])

    def load_all_values(self) -> List[AggregateValue]:
        table = self._table()
        stmt = (
            select(func.coalesce(table.c.value, UNKNOWN).label("id"), func.count().label("count"))
            .select_from(books.outerjoin(table, books.c.id == table.c.book))
            .group_by(table.c.value)
            .order_by(table.c.value)
        )
        out: List[AggregateValue] = []
        for row in self.store.query(stmt):
            value = int(row["id"])
            if value not in BOOLEAN_NAMES:
                LOG.warning("Unexpected bool value %s in custom column %s", value, self.column_id)
                continue
            out.append(AggregateValue(value, self.label(value), int(row["count"])))
        return out

    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        value = self._coerce_int(value_id)
        if value not in BOOLEAN_NAMES:
            return None
        return ColumnValue(value, self.label(value), self, known=value != UNKNOWN)

    def resolve_for_book(self, book_id: int) -> ColumnValue:
        table = self._table()
        stmt = select(table.c.value).where(table.c.book == bindparam("book")).limit(1)
        row = self.store.query_one(stmt, {"book": int(book_id)})
        if row is None or row["value"] is None:
            return self._unknown(UNKNOWN)
        value = int(row["value"])
        if value not in BOOLEAN_NAMES:
            return self._unknown(UNKNOWN)
        return self._value(value, self.label(value))

    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        table = self._table()
        value = self._coerce_int(value_id)
        if value == UNKNOWN:
            stmt = (
                self._books_select()
                .select_from(books.outerjoin(table, table.c.book == books.c.id))
                .where(table.c.value.is_(None))
            )
        elif value in (NO, YES):
            stmt = (
                self._books_select()
                .select_from(books.join(table, table.c.book == books.c.id))
                .where(table.c.value == literal_column(str(value)))
            )
        else:
            return None
        return BooksQuery(stmt.order_by(books.c.sort))

    def description(self) -> str:
        return self.localize("customcolumn.description.bool")


__all__ = ["BoolColumnType", "BOOLEAN_NAMES", "UNKNOWN", "NO", "YES"]
