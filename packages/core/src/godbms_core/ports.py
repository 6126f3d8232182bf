"""Ports implemented once per storage engine.

``DataStore`` is the CRUD capability over one collection/table. The relational
variant lives in ``godbms_persistence_sqlalchemy`` and the document variant in
``godbms_persistence_mongo``; ``BasicModel`` only ever talks to this protocol.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .engine import EngineKind

FilterSpec = Mapping[str, Any]
SortSpec = Mapping[str, str]
Record = dict[str, Any]
CountResult = dict[str, int]


@runtime_checkable
class DataStore(Protocol):
    """Engine-native CRUD over a single named collection or table.

    Every method is a coroutine. Filters and sorters have already been
    composed; stores compile them to their own dialect and raise a
    ``QueryError`` subclass for anything they cannot express.

    ``delete``/``delete_many`` mark records unavailable and never remove
    them. Marked records are hidden from every other method except
    ``restore``.
    """

    async def count(self, filter: FilterSpec | None = None) -> int: ...

    async def find_many(
        self,
        filter: FilterSpec | None,
        sorter: SortSpec | None,
        skip: int,
        take: int,
    ) -> list[Record]: ...

    async def find_first(self, filter: FilterSpec | None = None) -> Record | None: ...

    async def find_unique(self, name: str, value: Any) -> Record | None: ...

    async def create(self, data: Mapping[str, Any]) -> Record: ...

    async def create_many(self, data: Sequence[Mapping[str, Any]]) -> CountResult: ...

    async def update(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> Record | None: ...

    async def update_many(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> CountResult: ...

    async def delete(self, filter: FilterSpec | None = None) -> Record | None: ...

    async def delete_many(self, filter: FilterSpec | None = None) -> CountResult: ...

    async def restore(self, filter: FilterSpec | None = None) -> CountResult: ...


@runtime_checkable
class StoreHandle(Protocol):
    """Live connection handle. Shared by reference, owned by its connector."""

    @property
    def kind(self) -> EngineKind: ...

    def store(self, model_name: str) -> DataStore: ...


@runtime_checkable
class EngineConnector(Protocol):
    """Opens and closes one engine's handle. No business logic."""

    name: str

    @property
    def kind(self) -> EngineKind: ...

    @property
    def handle(self) -> StoreHandle | None: ...

    async def connect(self) -> StoreHandle | None:
        """Open the handle; log and return None when the engine is unreachable."""
        ...

    async def disconnect(self) -> None:
        """Release the handle. Idempotent."""
        ...
