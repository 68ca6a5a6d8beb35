"""Database infrastructure module."""

from .session import (
    Base,
    as_utc,
    close_db,
    create_engine,
    create_session_factory,
    get_session,
    get_session_factory,
    init_db,
)

__all__ = [
    "Base",
    "as_utc",
    "close_db",
    "create_engine",
    "create_session_factory",
    "get_session",
    "get_session_factory",
    "init_db",
]
