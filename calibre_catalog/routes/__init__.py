"""Flask route registration."""
from .custom_columns import register_custom_columns
from .health import register_health


def register_all(app) -> None:
    register_health(app)
    register_custom_columns(app)


__all__ = ["register_all", "register_custom_columns", "register_health"]
