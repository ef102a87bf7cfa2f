"""Rating columns.

calibre stores ratings as twice the number of stars (0, 2, ... 10) so half
stars fit in an integer. Value ids used by the catalog are the stored value.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from sqlalchemy import bindparam, func, literal_column, or_, select

from calibre_catalog.db.schema import books, link_table, normalized_value_table
from calibre_catalog.services.custom_columns.base import (
    LOG,
    AggregateValue,
    BooksQuery,
    ColumnValue,
    LinkedColumnType,
    ValueId,
)

MAX_STARS = 5


def stars(stored: int) -> Union[int, float]:
    half = stored / 2
    return int(half) if half.is_integer() else half


class RatingColumnType(LinkedColumnType):
    datatype = "rating"
    unknown_key = "customcolumn.rating.unknown"

    def _tables(self):
        return normalized_value_table(self.column_id), link_table(self.column_id)

    def stars_label(self, stored: int) -> str:
        count = stars(stored)
        return self.localize("customcolumn.stars", count).format(count)

    def load_all_values(self) -> List[AggregateValue]:
        values, link = self._tables()
        stmt = (
            select(func.coalesce(values.c.value, 0).label("value"), func.count().label("count"))
            .select_from(
                books.outerjoin(link, books.c.id == link.c.book).outerjoin(values, values.c.id == link.c.value)
            )
            .group_by(func.coalesce(values.c.value, -1))
        )
        counts: Dict[int, int] = {i * 2: 0 for i in range(MAX_STARS + 1)}
        for row in self.store.query(stmt):
            stored = int(row["value"])
            if stored in counts:
                # unrated books and explicit zero ratings share the 0 slot
                counts[stored] += int(row["count"])
            else:
                LOG.debug("Skipping half-star rating %s in custom column %s", stored, self.column_id)
        return [
            AggregateValue(i * 2, self.stars_label(i * 2), counts[i * 2])
            for i in range(MAX_STARS + 1)
        ]

    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        stored = self._coerce_int(value_id)
        return self._value(stored, self.stars_label(stored))

    def resolve_for_book(self, book_id: int) -> ColumnValue:
        values, link = self._tables()
        # no ORDER BY: with several link rows the store decides which one wins
        stmt = (
            select(values.c.value)
            .select_from(values.join(link, values.c.id == link.c.value))
            .where(link.c.book == bindparam("book"))
            .limit(1)
        )
        row = self.store.query_one(stmt, {"book": int(book_id)})
        if row is None or row["value"] is None:
            return self._unknown()
        stored = int(row["value"])
        return self._value(stored, self.stars_label(stored))

    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        values, link = self._tables()
        stored = self._coerce_int(value_id)
        if stored == 0:
            stmt = (
                self._books_select()
                .select_from(
                    books.outerjoin(link, link.c.book == books.c.id).outerjoin(values, values.c.id == link.c.value)
                )
                .where(or_(values.c.value.is_(None), values.c.value == literal_column("0")))
                .order_by(books.c.sort)
            )
            return BooksQuery(stmt)
        stmt = (
            self._books_select()
            .select_from(books.join(link, link.c.book == books.c.id).join(values, values.c.id == link.c.value))
            .where(values.c.value == bindparam("value"))
            .order_by(books.c.sort)
        )
        return BooksQuery(stmt, {"value": stored})

    def description(self) -> str:
        return self.localize("customcolumn.description.rating")


__all__ = ["RatingColumnType", "stars", "MAX_STARS"]
