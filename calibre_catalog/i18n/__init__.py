"""Catalog message lookup backed by Flask-Babel.

Callers receive *format strings* (``{0}`` placeholders) and substitute the
values themselves, e.g. ``localize("bookword", 3).format(3)``. Msgids are the
English strings so an untranslated catalog still reads naturally; outside a
Flask request Flask-Babel falls back to null translations.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple, Union

from flask_babel import gettext, ngettext

Localizer = Callable[..., str]

# key -> msgid, or (singular, plural) msgids for counted messages
MESSAGES: Dict[str, Union[str, Tuple[str, str]]] = {
    "bookword": ("{0} book", "{0} books"),
    "customcolumn.stars": ("{0} star", "{0} stars"),
    "customcolumn.description": "Custom column '{0}'",
    "customcolumn.description.series": ("Custom column with {0} series", "Custom column with {0} series"),
    "customcolumn.description.enum": ("Custom column with {0} value", "Custom column with {0} values"),
    "customcolumn.description.rating": "Custom column with ratings from 0 to 5 stars",
    "customcolumn.description.bool": "Custom column with Yes/No values",
    "customcolumn.date.format": "%Y-%m-%d",
    "customcolumn.boolean.yes": "Yes",
    "customcolumn.boolean.no": "No",
    "customcolumn.boolean.unknown": "Not Set",
    "customcolumn.text.unknown": "Not Set",
    "customcolumn.series.unknown": "Not Set",
    "customcolumn.enum.unknown": "Not Set",
    "customcolumn.date.unknown": "Not Set",
    "customcolumn.rating.unknown": "Not Set",
    "customcolumn.int.unknown": "Not Set",
    "customcolumn.float.unknown": "Not Set",
}


def localize(key: str, count: Optional[Union[int, float]] = None) -> str:
    """Return the translated format string for `key`.

    Unknown keys are returned unchanged so a missing message shows up in the
    page instead of failing the request.
    """
    message = MESSAGES.get(key)
    if message is None:
        return key
    if isinstance(message, tuple):
        singular, plural = message
        return ngettext(singular, plural, count if count is not None else 1)
    return gettext(message)


__all__ = ["Localizer", "MESSAGES", "localize"]
