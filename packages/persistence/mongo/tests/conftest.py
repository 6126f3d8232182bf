"""Fixtures for the document engine backed by mongomock-motor."""

from __future__ import annotations

import uuid

import pytest
from mongomock_motor import AsyncMongoMockClient

from godbms_core import RequestContext
from godbms_persistence_mongo import MongoHandle


@pytest.fixture
def handle() -> MongoHandle:
    return MongoHandle(AsyncMongoMockClient(), f"godbms_{uuid.uuid4().hex[:8]}")


@pytest.fixture
def ctx(handle: MongoHandle) -> RequestContext:
    return RequestContext(ddb=handle)


@pytest.fixture
async def seeded(handle: MongoHandle) -> MongoHandle:
    await handle.store("books").create_many(
        [
            {"title": "Dune", "author": "Herbert", "pages": 412},
            {"title": "Emma", "author": "Austen", "pages": 474},
            {"title": "Ubik", "author": "Dick", "pages": 202},
            {"title": "Solaris", "author": "Lem", "pages": 204},
        ]
    )
    return handle
