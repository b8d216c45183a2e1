"""Core application modules."""

from app.db.database import (
    Database,
    create_engine_from_settings,
    get_database,
    get_session,
)

__all__ = [
    "Database",
    "create_engine_from_settings",
    "get_database",
    "get_session",
]
