"""Exceptions for the SQLAlchemy persistence layer."""

from __future__ import annotations

from godbms_core.exceptions import (
    EngineConnectionError,
    PersistenceError,
    QueryError,
)


class SQLAlchemyPersistenceError(PersistenceError):
    """Base exception for all SQLAlchemy-specific persistence errors."""


class SQLAlchemyConnectionError(SQLAlchemyPersistenceError, EngineConnectionError):
    """Raised when the relational engine cannot be reached."""


class SQLAlchemyQueryError(SQLAlchemyPersistenceError, QueryError):
    """Raised when a filter, sort or payload does not fit the mapped model."""


class SoftDeleteUnsupportedError(SQLAlchemyPersistenceError):
    """Raised when deleting from a model that has no soft-delete column."""


__all__: list[str] = [
    "SQLAlchemyConnectionError",
    "SQLAlchemyPersistenceError",
    "SQLAlchemyQueryError",
    "SoftDeleteUnsupportedError",
]
