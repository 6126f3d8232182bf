"""Exception hierarchy shared by every godbms package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import EngineKind


class GodbmsError(Exception):
    """Root exception for the entire godbms toolkit."""


class ValidationError(GodbmsError):
    """Raised when client-supplied query input is rejected.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class ConfigurationError(GodbmsError):
    """Raised when settings cannot be turned into a working engine setup."""


class UnknownEngineError(ConfigurationError):
    """Raised when an engine selector names an engine nobody registered."""

    def __init__(self, kind: EngineKind, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind.value} engine {name!r}")


class InfrastructureError(GodbmsError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class EngineConnectionError(PersistenceError):
    """Raised when a storage engine cannot be reached."""


class MissingHandleError(PersistenceError):
    """Raised when a request context carries no handle for the wanted engine."""

    def __init__(self, kind: EngineKind) -> None:
        self.kind = kind
        super().__init__(
            f"Request context has no live {kind.value} handle; "
            "is the engine selected and connected?"
        )


class QueryError(PersistenceError):
    """Raised when a filter or sort cannot be compiled for an engine."""


class QueryTimeoutError(PersistenceError):
    """Raised when a storage call exceeds the request's timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} did not complete within {timeout}s")
