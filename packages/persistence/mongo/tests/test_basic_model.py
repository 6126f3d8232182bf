"""BasicModel over the document engine: mutation failures end to end."""

from __future__ import annotations

import logging

import pytest

from godbms_core import BasicModel, EngineKind, RequestContext
from godbms_persistence_mongo import MongoHandle


@pytest.mark.asyncio
class TestBasicModelDocument:
    async def test_duplicate_unique_key_returns_none(
        self,
        handle: MongoHandle,
        ctx: RequestContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        await handle.database.get_collection("books").create_index("isbn", unique=True)
        books = BasicModel("books", ctx, engine=EngineKind.DOCUMENT)
        assert await books.create({"title": "Dune", "isbn": "1"}) is not None
        with caplog.at_level(logging.ERROR, logger="godbms_core.model"):
            assert await books.create({"title": "Dune II", "isbn": "1"}) is None
        assert "BasicModel.create(books) failed" in caplog.text
        assert await books.count() == 1
        assert (await books.find_first("isbn", "1"))["title"] == "Dune"

    async def test_empty_collection_pages_to_nothing(self, ctx: RequestContext) -> None:
        books = BasicModel("books", ctx, engine=EngineKind.DOCUMENT)
        total = await books.count()
        assert total == 0
        assert await books.find_many(None, None, 0, total) == []
