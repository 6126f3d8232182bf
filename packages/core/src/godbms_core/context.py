"""RequestContext — per-request view of the live engine handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .engine import EngineKind
from .exceptions import MissingHandleError

if TYPE_CHECKING:
    from .ports import StoreHandle


@dataclass(frozen=True)
class RequestContext:
    """Handles a request may use, plus the per-call storage timeout.

    Built by the web layer (usually through ``EngineRegistry.context()``) and
    dropped when the request ends. It references the handles; it never
    closes them.
    """

    db: StoreHandle | None = None
    ddb: StoreHandle | None = None
    timeout: float | None = None

    def handle(self, kind: EngineKind) -> StoreHandle:
        """Return the handle for *kind*; raise if the request has none."""
        handle = self.db if kind is EngineKind.RELATIONAL else self.ddb
        if handle is None:
            raise MissingHandleError(kind)
        return handle

    def has(self, kind: EngineKind) -> bool:
        return (self.db if kind is EngineKind.RELATIONAL else self.ddb) is not None
