"""Engine selection and startup wiring for godbms."""

from __future__ import annotations

from .catalog import (
    DOCUMENT_ENGINES,
    RELATIONAL_ENGINES,
    ConnectorFactory,
    EngineCatalog,
    mongo_factory,
    sqlalchemy_factory,
)
from .registry import EngineRegistry

__all__ = [
    "EngineRegistry",
    "EngineCatalog",
    "ConnectorFactory",
    "sqlalchemy_factory",
    "mongo_factory",
    "RELATIONAL_ENGINES",
    "DOCUMENT_ENGINES",
]
