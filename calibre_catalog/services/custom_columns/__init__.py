"""Custom column browsing.

Typical use per request::

    column = create_by_lookup(store, "genre")
    entries = column.all_values()
    query = column.books_query(7)
"""
from .base import (
    ALL_CUSTOMS_ID,
    AggregateValue,
    BooksQuery,
    ColumnMetadata,
    ColumnType,
    ColumnValue,
    CustomColumnError,
    InvalidDate,
    InvalidValueId,
    UnknownDatatype,
)
from .boolean import BoolColumnType
from .date import DateColumnType
from .factory import (
    COLUMN_TYPES,
    build_column_type,
    create_browse_columns,
    create_by_column_id,
    create_by_lookup,
    list_column_entries,
    load_metadata,
    resolve_custom_value,
)
from .numeric import FloatColumnType, IntColumnType
from .rating import RatingColumnType
from .text import EnumerationColumnType, SeriesColumnType, TextColumnType

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
    "UnknownDatatype",
    "COLUMN_TYPES",
    "build_column_type",
    "create_browse_columns",
    "create_by_column_id",
    "create_by_lookup",
    "list_column_entries",
    "load_metadata",
    "resolve_custom_value",
    "TextColumnType",
    "SeriesColumnType",
    "EnumerationColumnType",
    "DateColumnType",
    "RatingColumnType",
    "BoolColumnType",
    "IntColumnType",
    "FloatColumnType",
]
