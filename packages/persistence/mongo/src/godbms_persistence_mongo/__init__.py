"""MongoDB (Motor) document engine for godbms."""

from __future__ import annotations

from .connection import MongoConnector, MongoHandle
from .exceptions import (
    MongoConnectionError,
    MongoPersistenceError,
    MongoQueryError,
)
from .query_builder import MongoQueryBuilder
from .serialization import doc_to_record, record_to_doc
from .store import MongoStore

__all__ = [
    # Engine
    "MongoConnector",
    "MongoHandle",
    "MongoStore",
    # Utilities
    "MongoQueryBuilder",
    "doc_to_record",
    "record_to_doc",
    # Exceptions
    "MongoPersistenceError",
    "MongoConnectionError",
    "MongoQueryError",
]
