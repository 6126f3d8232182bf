"""SQLAlchemy (asyncio) relational engine for godbms."""

from __future__ import annotations

from .connection import SQLAlchemyConnector, SQLAlchemyHandle
from .exceptions import (
    SoftDeleteUnsupportedError,
    SQLAlchemyConnectionError,
    SQLAlchemyPersistenceError,
    SQLAlchemyQueryError,
)
from .filters import build_order_by, build_where
from .mixins import SoftDeleteModelMixin, TimestampModelMixin
from .operators import (
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_registry,
)
from .store import SQLAlchemyStore

__all__ = [
    # Engine
    "SQLAlchemyConnector",
    "SQLAlchemyHandle",
    "SQLAlchemyStore",
    # Models
    "SoftDeleteModelMixin",
    "TimestampModelMixin",
    # Compiler
    "build_where",
    "build_order_by",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_registry",
    # Exceptions
    "SQLAlchemyPersistenceError",
    "SQLAlchemyConnectionError",
    "SQLAlchemyQueryError",
    "SoftDeleteUnsupportedError",
]
