"""Shared fixtures for godbms-core tests: an in-memory store behind a handle."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from godbms_core import EngineKind, RequestContext


class RecordingStore:
    """DataStore double that records calls and returns canned results.

    ``error`` is raised by every call when set; ``delay`` makes every call
    sleep first so timeouts can be exercised.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.rows: list[dict[str, Any]] = [
            {"id": 1, "name": "Alice", "age": 31},
            {"id": 2, "name": "Bob", "age": 25},
        ]

    async def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

    async def count(self, filter=None):
        await self._call("count", filter)
        return len(self.rows)

    async def find_many(self, filter, sorter, skip, take):
        await self._call("find_many", filter, sorter, skip, take)
        return self.rows[skip : skip + take]

    async def find_first(self, filter=None):
        await self._call("find_first", filter)
        return self.rows[0] if self.rows else None

    async def find_unique(self, name, value):
        await self._call("find_unique", name, value)
        return next((r for r in self.rows if r.get(name) == value), None)

    async def create(self, data):
        await self._call("create", data)
        return {"id": len(self.rows) + 1, **data}

    async def create_many(self, data):
        await self._call("create_many", data)
        return {"count": len(data)}

    async def update(self, filter, data):
        await self._call("update", filter, data)
        return {**self.rows[0], **data}

    async def update_many(self, filter, data):
        await self._call("update_many", filter, data)
        return {"count": len(self.rows)}

    async def delete(self, filter=None):
        await self._call("delete", filter)
        return self.rows[0]

    async def delete_many(self, filter=None):
        await self._call("delete_many", filter)
        return {"count": len(self.rows)}

    async def restore(self, filter=None):
        await self._call("restore", filter)
        return {"count": 0}


class RecordingHandle:
    def __init__(self, kind: EngineKind) -> None:
        self._kind = kind
        self.stores: dict[str, RecordingStore] = {}

    @property
    def kind(self) -> EngineKind:
        return self._kind

    def store(self, model_name: str) -> RecordingStore:
        return self.stores.setdefault(model_name, RecordingStore())


@pytest.fixture
def db() -> RecordingHandle:
    return RecordingHandle(EngineKind.RELATIONAL)


@pytest.fixture
def ddb() -> RecordingHandle:
    return RecordingHandle(EngineKind.DOCUMENT)


@pytest.fixture
def ctx(db: RecordingHandle, ddb: RecordingHandle) -> RequestContext:
    return RequestContext(db=db, ddb=ddb)
