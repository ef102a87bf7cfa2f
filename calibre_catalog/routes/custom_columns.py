"""Custom column catalog pages (JSON).

/custom                       index of configured browse columns
/custom/<column_id>           every value of a column with its book count
/custom/<column_id>/<value>   one value and the books holding it
/book/<book_id>/custom        a book's values for the browse columns

Column types are built per request and discarded with the response.
"""
from __future__ import annotations

from typing import Any, Tuple

from flask import Blueprint, jsonify
from flask_babel import Babel

from calibre_catalog import config as app_config
from calibre_catalog.db.store import CatalogStore
from calibre_catalog.services.custom_columns import (
    InvalidValueId,
    UnknownDatatype,
    create_browse_columns,
    create_by_column_id,
    list_column_entries,
)
from calibre_catalog.utils.logging import get_logger

LOG = get_logger("routes.custom_columns")

bp = Blueprint("custom_columns", __name__)


def _store() -> CatalogStore:
    return CatalogStore()


def _error(code: str, status: int, **extra: Any) -> Tuple[Any, int]:
    payload = {"error": code}
    payload.update(extra)
    return jsonify(payload), status


@bp.errorhandler(UnknownDatatype)
def _unknown_datatype(exc: UnknownDatatype):
    if exc.datatype is None:
        return _error("unknown_column", 404)
    LOG.error("Custom column has unknown datatype %r", exc.datatype)
    return _error("unknown_datatype", 500, datatype=exc.datatype)


@bp.errorhandler(InvalidValueId)
def _invalid_value(exc: InvalidValueId):
    return _error("invalid_value", 400, detail=str(exc))


@bp.route("/custom", methods=["GET"])
def custom_index():
    entries = list_column_entries(_store(), app_config.browse_columns())
    return jsonify({"entries": [entry.as_dict() for entry in entries]})


@bp.route("/custom/<int:column_id>", methods=["GET"])
def custom_column(column_id: int):
    column_type = create_by_column_id(_store(), column_id)
    if column_type is None:
        return _error("unsupported_column", 404)
    return jsonify({
        "column": column_type.column_entry().as_dict(),
        "entries": [entry.as_dict() for entry in column_type.all_values()],
    })


@bp.route("/custom/<int:column_id>/<value_id>", methods=["GET"])
def custom_detail(column_id: int, value_id: str):
    store = _store()
    column_type = create_by_column_id(store, column_id)
    if column_type is None:
        return _error("unsupported_column", 404)
    value = column_type.resolve_value(value_id)
    if value is None:
        return _error("unknown_value", 404)
    query = value.books_query()
    books = query.execute(store) if query is not None else []
    return jsonify({
        "column": column_type.title,
        "value": value.as_dict(),
        "entry_id": value.entry_id,
        "books": [{"id": row["id"], "title": row["title"]} for row in books],
    })


@bp.route("/book/<int:book_id>/custom", methods=["GET"])
def book_custom_values(book_id: int):
    columns = create_browse_columns(_store(), app_config.browse_columns())
    values = []
    for column_type in columns:
        value = column_type.resolve_for_book(book_id)
        values.append({"column": column_type.title, **value.as_dict()})
    return jsonify({"book_id": book_id, "values": values})


def register_custom_columns(app: Any) -> None:
    if getattr(app, "_custom_columns_bp", None):  # idempotent
        return
    if "babel" not in getattr(app, "extensions", {}):
        Babel(app)
    app.register_blueprint(bp)
    setattr(app, "_custom_columns_bp", bp)
    LOG.debug("custom columns blueprint registered")


__all__ = ["register_custom_columns", "bp"]
