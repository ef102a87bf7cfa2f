"""Service exports."""

from . import custom_columns, entries

__all__ = [
    "custom_columns",
    "entries",
]
