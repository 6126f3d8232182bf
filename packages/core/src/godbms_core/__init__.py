"""godbms-core — engine-agnostic data-access contract.

No storage driver dependencies; engines plug in through ``godbms_core.ports``.
"""

from __future__ import annotations

from .context import RequestContext
from .engine import (
    CREATED_AT,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DELETED_AT,
    UPDATED_AT,
    EngineKind,
)
from .exceptions import (
    ConfigurationError,
    EngineConnectionError,
    GodbmsError,
    InfrastructureError,
    MissingHandleError,
    PersistenceError,
    QueryError,
    QueryTimeoutError,
    UnknownEngineError,
    ValidationError,
)
from .model import BasicModel
from .operators import FilterOperator, LogicalOperator, SortDirection
from .ports import (
    CountResult,
    DataStore,
    EngineConnector,
    FilterSpec,
    Record,
    SortSpec,
    StoreHandle,
)
from .settings import EngineSettings, get_settings

__all__ = [
    # Model
    "BasicModel",
    "RequestContext",
    # Engines
    "EngineKind",
    "CREATED_AT",
    "UPDATED_AT",
    "DELETED_AT",
    "DEFAULT_LIMIT",
    "DEFAULT_OFFSET",
    # Ports
    "DataStore",
    "StoreHandle",
    "EngineConnector",
    "FilterSpec",
    "SortSpec",
    "Record",
    "CountResult",
    # Operators
    "FilterOperator",
    "LogicalOperator",
    "SortDirection",
    # Settings
    "EngineSettings",
    "get_settings",
    # Exceptions
    "GodbmsError",
    "ValidationError",
    "ConfigurationError",
    "UnknownEngineError",
    "InfrastructureError",
    "PersistenceError",
    "EngineConnectionError",
    "MissingHandleError",
    "QueryError",
    "QueryTimeoutError",
]
