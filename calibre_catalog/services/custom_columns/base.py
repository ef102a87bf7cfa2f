"""Custom column abstractions shared by every datatype.

A `ColumnType` is a request-scoped snapshot of one calibre custom column: the
constructor reads the distinct values with their book counts once and serves
them from memory afterwards. Concrete subclasses know the table layout and
formatting quirks of their datatype (see the sibling modules).
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.sql import Select

from calibre_catalog.db.schema import books, link_table_name, value_table_name
from calibre_catalog.db.store import CatalogStore
from calibre_catalog.i18n import Localizer, localize as default_localize
from calibre_catalog.services.entries import Entry, LinkNavigation
from calibre_catalog.utils.logging import get_logger

LOG = get_logger("custom_columns")

ALL_CUSTOMS_ID = "custom"

ValueId = Union[int, float, str, None]


class CustomColumnError(Exception):
    """Base class for custom column failures."""


class UnknownDatatype(CustomColumnError):
    """Raised when a column's datatype is not one calibre defines."""

    def __init__(self, datatype: Optional[str]):
        super().__init__(f"Unknown column type: {datatype}")
        self.datatype = datatype


class InvalidValueId(CustomColumnError, ValueError):
    """Raised when a value id cannot be interpreted for the column's datatype."""


class InvalidDate(InvalidValueId):
    """Raised when a date column receives an unparseable date."""


@dataclass(frozen=True)
class ColumnMetadata:
    """Raw definition row from calibre's `custom_columns` table."""

    id: int
    label: str
    name: str
    datatype: Optional[str]
    display: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ColumnMetadata":
        display: Dict[str, Any] = {}
        raw = row.get("display")
        if raw:
            try:
                parsed = json.loads(raw)
                if isinstance(parsed, dict):
                    display = parsed
            except ValueError:
                LOG.warning("Ignoring malformed display JSON for custom column %s", row.get("id"))
        return cls(
            id=int(row["id"]),
            label=row.get("label") or "",
            name=row.get("name") or "",
            datatype=row.get("datatype"),
            display=display,
        )


@dataclass(frozen=True)
class AggregateValue:
    """One distinct value of a column together with its book count."""

    value_id: ValueId
    label: str
    count: int


@dataclass(frozen=True)
class BooksQuery:
    """Select over `books` matching one column value.

    The statement only ever refers to the bind parameter named ``value``;
    `params` is empty for shapes that need no parameter.
    """

    statement: Select
    params: Dict[str, Any] = field(default_factory=dict)

    def execute(self, store: CatalogStore) -> List[Mapping[str, Any]]:
        return store.query(self.statement, self.params)


@dataclass(frozen=True, eq=False)
class ColumnValue:
    """A single value of a custom column.

    `known` is False for the placeholder returned when a book has nothing
    stored in the column.
    """

    value_id: ValueId
    name: str
    column_type: "ColumnType" = field(repr=False)
    known: bool = True

    @property
    def uri(self) -> str:
        return self.column_type.uri(self.value_id)

    @property
    def entry_id(self) -> str:
        return self.column_type.entry_id(self.value_id)

    def books_query(self) -> Optional[BooksQuery]:
        return self.column_type.books_query(self.value_id)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.value_id,
            "name": self.name,
            "known": self.known,
            "column_id": self.column_type.column_id,
            "datatype": self.column_type.datatype,
        }


class ColumnType(ABC):
    """A single calibre custom column."""

    datatype: ClassVar[str] = ""
    # localization key of the "not set" label
    unknown_key: ClassVar[str] = ""

    def __init__(self, metadata: ColumnMetadata, store: CatalogStore, localize: Optional[Localizer] = None):
        self.metadata = metadata
        self.column_id = metadata.id
        self.title = metadata.name
        self.store = store
        self.localize: Localizer = localize or default_localize
        self._values: List[AggregateValue] = self.load_all_values()
        LOG.debug(
            "Loaded %s values for custom column %s (%s)",
            len(self._values),
            self.column_id,
            self.datatype,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.column_id} title={self.title!r}>"

    # -- tables ---------------------------------------------------------

    def table_name(self) -> str:
        return value_table_name(self.column_id)

    def link_table_name(self) -> Optional[str]:
        """Name of the many-to-many table, None for single-valued columns."""
        return None

    # -- navigation -----------------------------------------------------

    def uri(self, value_id: ValueId) -> str:
        return f"/custom/{self.column_id}/{value_id}"

    def uri_all_values(self) -> str:
        return f"/custom/{self.column_id}"

    def entry_id(self, value_id: ValueId) -> str:
        return f"{ALL_CUSTOMS_ID}:{self.column_id}:{value_id}"

    def all_values_id(self) -> str:
        return f"{ALL_CUSTOMS_ID}:{self.column_id}"

    def column_entry(self) -> Entry:
        """Index page entry describing the column itself."""
        return Entry(
            title=self.title,
            entry_id=self.all_values_id(),
            content=self.description(),
            content_type=self.datatype,
            links=[LinkNavigation(self.uri_all_values())],
            count=self.distinct_value_count(),
        )

    # -- cached aggregates ----------------------------------------------

    def value_counts(self) -> List[AggregateValue]:
        return list(self._values)

    def all_values(self) -> List[Entry]:
        return [self._entry(value) for value in self._values]

    def distinct_value_count(self) -> int:
        return len(self._values)

    def _entry(self, value: AggregateValue) -> Entry:
        return Entry(
            title=value.label,
            entry_id=self.entry_id(value.value_id),
            content=self.book_count_label(value.count),
            content_type=self.datatype,
            links=[LinkNavigation(self.uri(value.value_id))],
            count=value.count,
        )

    def book_count_label(self, count: int) -> str:
        return self.localize("bookword", count).format(count)

    # -- descriptions ---------------------------------------------------

    def database_description(self) -> Optional[str]:
        description = self.metadata.display.get("description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        return None

    def description(self) -> str:
        return self.database_description() or self.localize("customcolumn.description").format(self.title)

    # -- helpers for subclasses -----------------------------------------

    def _value(self, value_id: ValueId, name: str) -> ColumnValue:
        return ColumnValue(value_id, name, self)

    def _unknown(self, value_id: ValueId = None) -> ColumnValue:
        return ColumnValue(value_id, self.localize(self.unknown_key), self, known=False)

    @staticmethod
    def _books_select() -> Select:
        return select(books.c.id, books.c.title, books.c.sort)

    @staticmethod
    def _coerce_int(value_id: ValueId) -> int:
        if isinstance(value_id, bool):
            return int(value_id)
        if isinstance(value_id, int):
            return value_id
        if isinstance(value_id, float) and value_id.is_integer():
            return int(value_id)
        try:
            return int(str(value_id).strip())
        except (TypeError, ValueError):
            raise InvalidValueId(f"Invalid value id: {value_id!r}") from None

    # -- datatype specific ----------------------------------------------

    @abstractmethod
    def load_all_values(self) -> List[AggregateValue]:
        """Query every distinct value of the column with its book count."""

    @abstractmethod
    def resolve_value(self, value_id: ValueId) -> Optional[ColumnValue]:
        """Return the value identified by `value_id`, None when absent."""

    @abstractmethod
    def resolve_for_book(self, book_id: int) -> ColumnValue:
        """Return the value stored for `book_id`, or the "not set" value."""

    @abstractmethod
    def books_query(self, value_id: ValueId) -> Optional[BooksQuery]:
        """Build the query listing books that hold `value_id`."""


class LinkedColumnType(ColumnType):
    """Columns whose values live in their own table, joined through a link table."""

    def link_table_name(self) -> Optional[str]:
        return link_table_name(self.column_id)


__all__ = [
    "ALL_CUSTOMS_ID",
    "AggregateValue",
    "BooksQuery",
    "ColumnMetadata",
    "ColumnType",
    "ColumnValue",
    "CustomColumnError",
    "InvalidDate",
    "InvalidValueId",
    "LinkedColumnType",
    "UnknownDatatype",
    "ValueId",
]
