"""Engine kinds and the bookkeeping fields every store understands."""

from __future__ import annotations

from enum import Enum


class EngineKind(str, Enum):
    """Storage backend families. One active engine per kind."""

    RELATIONAL = "relational"
    DOCUMENT = "document"


# Record bookkeeping fields, shared by both engines.
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"
DELETED_AT = "deletedAt"

DEFAULT_LIMIT = 30
DEFAULT_OFFSET = 0
