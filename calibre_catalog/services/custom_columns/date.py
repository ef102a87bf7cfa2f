"""Date columns.

Stored as full timestamps in ``custom_column_<id>(book, value)``; the catalog
groups and matches on the calendar date only. Value ids are ISO dates
("2023-06-15"); per-book values carry the epoch seconds of that date.
"""
from __future__ import annotations

import datetime
from typing import List, Optional

from sqlalchemy import bindparam, func, select

from calibre_catalog.db.schema import books, direct_value_table
from calibre_catalog.services.custom_columns.base import (
    LOG,
    AggregateValue,
    BooksQuery,
    ColumnType,
    ColumnValue,
    InvalidDate,
    ValueId,
)


def parse_date(value: ValueId) -> datetime.date:
    """Interpret an ISO date/timestamp string or epoch seconds as a date."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_epoch(value)
    raw = str(value or "").strip()
    if not raw:
        raise InvalidDate(f"Invalid date: {value!r}")
    if raw.lstrip("-").isdigit():
        # compact YYYYMMDD wins over an 8 digit epoch
        if len(raw) == 8:
            try:
                return datetime.date.fromisoformat(raw)
            except ValueError:
                pass
        return _from_epoch(int(raw))
    try:
        if len(raw) == 10:
            return datetime.date.fromisoformat(raw)
        return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidDate(f"Invalid date: {value!r}") from None


def _from_epoch(seconds) -> datetime.date:
    try:
        return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        raise InvalidDate(f"Invalid date: {seconds!r}") from None


def epoch_seconds(day: datetime.date) -> int:
    midnight = datetime.datetime(day.year, day.month, day.day, tzinfo=datetime.timezone.utc)
    return int(midnight.timestamp())


class DateColumnType(ColumnType):
    datatype = "datetime"
    unknown_key = "customcolumn.date.unknown"

    def _table(self):
        return direct_value_table(self.column_id)

    def format_date(self, day: datetime.date) -> str:
        return day.strftime(self.localize("customcolumn.date.format"))

    def load_all_values(self) -> List[AggregateValue]:
        table = self._table()
        datevalue = func.date(table.c.value)
        stmt = (
            select(datevalue.label("datevalue"), func.count().label("count"))
            .group_by(datevalue)
            .order_by(datevalue)
        )
        out: List[AggregateValue] = []
        for row in self.store.query(stmt):
            try:
                day = parse_date(row["datevalue"])
            except InvalidDate:
                LOG.warning("Skipping unparseable date %r in custom column %s", row["datevalue"], self.column_id)
                continue
            out.append(AggregateValue(day.isoformat(), self.format_date(day), int(row["count"])))
        return out

    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        day = parse_date(value_id)
        return self._value(day.isoformat(), self.format_date(day))

    def resolve_for_book(self, book_id: int) -> ColumnValue:
        table = self._table()
        stmt = (
            select(func.date(table.c.value).label("datevalue"))
            .where(table.c.book == bindparam("book"))
            .limit(1)
        )
        row = self.store.query_one(stmt, {"book": int(book_id)})
        if row is None or row["datevalue"] is None:
            return self._unknown()
        day = parse_date(row["datevalue"])
        return self._value(epoch_seconds(day), self.format_date(day))

    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        table = self._table()
        day = parse_date(value_id)
        stmt = (
            self._books_select()
            .select_from(books.join(table, table.c.book == books.c.id))
            .where(func.date(table.c.value) == bindparam("value"))
            .order_by(books.c.sort)
        )
        return BooksQuery(stmt, {"value": day.isoformat()})


__all__ = ["DateColumnType", "parse_date", "epoch_seconds"]
