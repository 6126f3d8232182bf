"""MongoDB persistence exceptions."""

from __future__ import annotations

from godbms_core.exceptions import EngineConnectionError, PersistenceError, QueryError


class MongoPersistenceError(PersistenceError):
    """Base for MongoDB persistence errors."""


class MongoConnectionError(MongoPersistenceError, EngineConnectionError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPersistenceError, QueryError):
    """Raised when a filter, sort or payload cannot be compiled."""
