"""Column type dispatch.

Construction is two-phase: `load_metadata` reads the definition row, then
`build_column_type` picks the class for the datatype (whose constructor
loads the value cache). comments and composite columns cannot be browsed
and build to None.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Type

from sqlalchemy import bindparam, select

from calibre_catalog.db.schema import custom_columns
from calibre_catalog.db.store import CatalogStore
from calibre_catalog.i18n import Localizer
from calibre_catalog.services.entries import Entry
from calibre_catalog.services.custom_columns.base import (
    LOG,
    ColumnMetadata,
    ColumnType,
    ColumnValue,
    UnknownDatatype,
    ValueId,
)
from calibre_catalog.services.custom_columns.boolean import BoolColumnType
from calibre_catalog.services.custom_columns.date import DateColumnType
from calibre_catalog.services.custom_columns.numeric import FloatColumnType, IntColumnType
from calibre_catalog.services.custom_columns.rating import RatingColumnType
from calibre_catalog.services.custom_columns.text import (
    EnumerationColumnType,
    SeriesColumnType,
    TextColumnType,
)

CUSTOM_TYPE_TEXT = "text"
CUSTOM_TYPE_COMMENTS = "comments"
CUSTOM_TYPE_SERIES = "series"
CUSTOM_TYPE_ENUM = "enumeration"
CUSTOM_TYPE_DATE = "datetime"
CUSTOM_TYPE_FLOAT = "float"
CUSTOM_TYPE_INT = "int"
CUSTOM_TYPE_RATING = "rating"
CUSTOM_TYPE_BOOL = "bool"
CUSTOM_TYPE_COMPOSITE = "composite"

COLUMN_TYPES: Dict[str, Optional[Type[ColumnType]]] = {
    CUSTOM_TYPE_TEXT: TextColumnType,
    CUSTOM_TYPE_COMMENTS: None,
    CUSTOM_TYPE_SERIES: SeriesColumnType,
    CUSTOM_TYPE_ENUM: EnumerationColumnType,
    CUSTOM_TYPE_DATE: DateColumnType,
    CUSTOM_TYPE_FLOAT: FloatColumnType,
    CUSTOM_TYPE_INT: IntColumnType,
    CUSTOM_TYPE_RATING: RatingColumnType,
    CUSTOM_TYPE_BOOL: BoolColumnType,
    CUSTOM_TYPE_COMPOSITE: None,
}

_METADATA_COLUMNS = (
    custom_columns.c.id,
    custom_columns.c.label,
    custom_columns.c.name,
    custom_columns.c.datatype,
    custom_columns.c.display,
)


def load_metadata(store: CatalogStore, column_id: int) -> Optional[ColumnMetadata]:
    stmt = select(*_METADATA_COLUMNS).where(custom_columns.c.id == bindparam("id"))
    row = store.query_one(stmt, {"id": int(column_id)})
    return ColumnMetadata.from_row(row) if row is not None else None


def lookup_column_id(store: CatalogStore, lookup: str) -> Optional[int]:
    stmt = select(custom_columns.c.id).where(custom_columns.c.label == bindparam("label"))
    row = store.query_one(stmt, {"label": lookup})
    return int(row["id"]) if row is not None else None


def build_column_type(
    metadata: ColumnMetadata,
    store: CatalogStore,
    localize: Optional[Localizer] = None,
) -> Optional[ColumnType]:
    if metadata.datatype not in COLUMN_TYPES:
        raise UnknownDatatype(metadata.datatype)
    cls = COLUMN_TYPES[metadata.datatype]  # type: ignore[index]
    if cls is None:
        LOG.debug("Custom column %s (%s) cannot be browsed", metadata.id, metadata.datatype)
        return None
    return cls(metadata, store, localize)


def create_by_column_id(
    store: CatalogStore,
    column_id: int,
    localize: Optional[Localizer] = None,
) -> Optional[ColumnType]:
    """Create the column type for `column_id`.

    Returns None for comments/composite columns. Raises `UnknownDatatype`
    when the id is null or not an integer, when the column does not exist,
    or when it has a datatype calibre does not define.
    """
    try:
        column_id = int(column_id)
    except (TypeError, ValueError):
        raise UnknownDatatype(None) from None
    metadata = load_metadata(store, column_id)
    if metadata is None:
        raise UnknownDatatype(None)
    return build_column_type(metadata, store, localize)


def create_by_lookup(
    store: CatalogStore,
    lookup: str,
    localize: Optional[Localizer] = None,
) -> Optional[ColumnType]:
    """Create the column type by lookup name (``#genre`` is ``genre``)."""
    column_id = lookup_column_id(store, lookup)
    if column_id is None:
        return None
    return create_by_column_id(store, column_id, localize)


def resolve_custom_value(
    store: CatalogStore,
    column_id: int,
    value_id: ValueId,
    localize: Optional[Localizer] = None,
) -> Optional[ColumnValue]:
    column_type = create_by_column_id(store, column_id, localize)
    if column_type is None:
        return None
    return column_type.resolve_value(value_id)


def create_browse_columns(
    store: CatalogStore,
    lookups: Iterable[str],
    localize: Optional[Localizer] = None,
) -> List[ColumnType]:
    """Column types for the given lookup names, skipping missing or unbrowsable ones."""
    out: List[ColumnType] = []
    for lookup in lookups:
        column_type = create_by_lookup(store, lookup, localize)
        if column_type is None:
            LOG.debug("Custom column lookup %r not browsable; skipping", lookup)
            continue
        out.append(column_type)
    return out


def list_column_entries(
    store: CatalogStore,
    lookups: Iterable[str],
    localize: Optional[Localizer] = None,
) -> List[Entry]:
    return [column_type.column_entry() for column_type in create_browse_columns(store, lookups, localize)]


__all__ = [
    "COLUMN_TYPES",
    "CUSTOM_TYPE_TEXT",
    "CUSTOM_TYPE_COMMENTS",
    "CUSTOM_TYPE_SERIES",
    "CUSTOM_TYPE_ENUM",
    "CUSTOM_TYPE_DATE",
    "CUSTOM_TYPE_FLOAT",
    "CUSTOM_TYPE_INT",
    "CUSTOM_TYPE_RATING",
    "CUSTOM_TYPE_BOOL",
    "CUSTOM_TYPE_COMPOSITE",
    "load_metadata",
    "lookup_column_id",
    "build_column_type",
    "create_by_column_id",
    "create_by_lookup",
    "resolve_custom_value",
    "create_browse_columns",
    "list_column_entries",
]
