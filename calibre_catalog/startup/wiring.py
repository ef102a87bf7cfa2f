"""Application initialization / wiring.

Orchestrates: catalog engine init and route registration.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Flask

from calibre_catalog.config import summarize_runtime_config
from calibre_catalog.db import init_engine_once
from calibre_catalog.routes import register_all as register_routes
from calibre_catalog.utils.logging import get_logger

LOG = get_logger("startup")


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("Catalog engine initialized")
    register_routes(app)
    LOG.info("Catalog startup wiring complete: %s", summarize_runtime_config())


def create_app(config: Optional[dict] = None) -> Flask:
    app = Flask("calibre_catalog")
    if config:
        app.config.update(config)
    init_app(app)
    return app


__all__ = ["init_app", "create_app"]
