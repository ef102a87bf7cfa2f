"""Package logging.

Every module logger lives under the ``calibre_catalog`` logger, which owns the
single stream handler and the level from
`calibre_catalog.config.log_level_name()`. Module loggers propagate to it.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from calibre_catalog import config as app_config

PACKAGE_LOGGER = "calibre_catalog"
LOG_FORMAT = "[catalog] %(asctime)s %(levelname)s %(name)s %(message)s"

_LOCK = threading.Lock()
_PACKAGE: Optional[logging.Logger] = None


def _package_logger() -> logging.Logger:
    global _PACKAGE
    if _PACKAGE is not None:
        return _PACKAGE
    with _LOCK:
        if _PACKAGE is not None:
            return _PACKAGE
        logger = logging.getLogger(PACKAGE_LOGGER)
        level = getattr(logging, app_config.log_level_name(), logging.INFO)
        logger.setLevel(level)
        if not any(getattr(h, "_catalog_handler", False) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            handler._catalog_handler = True  # type: ignore[attr-defined]
            logger.addHandler(handler)
        logger.propagate = False
        _PACKAGE = logger
        return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``calibre_catalog.<name>`` (the package logger when name is empty)."""
    package = _package_logger()
    if not name or name == PACKAGE_LOGGER:
        return package
    if name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


__all__ = ["get_logger", "PACKAGE_LOGGER"]
