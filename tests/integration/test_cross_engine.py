"""
End-to-end: client input -> allow-list -> BasicModel -> both engines.

Covers:
- The same composed filter/sort yields the same page on SQLite and mongomock
- Soft delete and restore behave identically on both engines
- Mutation failures return None on both engines; malformed reads raise
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
from mongomock_motor import AsyncMongoMockClient
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from godbms_core import BasicModel, EngineKind, QueryError, RequestContext
from godbms_filtering import FieldAllowList, PaginationParser, date, identity, numeric
from godbms_persistence_mongo import MongoHandle
from godbms_persistence_sqlalchemy import (
    SoftDeleteModelMixin,
    SQLAlchemyConnector,
    TimestampModelMixin,
)


class Base(DeclarativeBase):
    pass


class Person(TimestampModelMixin, SoftDeleteModelMixin, Base):
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(80), unique=True)
    age: Mapped[int] = mapped_column(Integer)


PEOPLE = FieldAllowList(
    filters={"name": identity, "age": numeric, "createdAt": date},
    sortable=["age", "name", "createdAt"],
    strict=False,
)

ROWS = [
    {"name": "Alice", "age": 31},
    {"name": "Bob", "age": 25},
    {"name": "Carol", "age": 42},
    {"name": "Dave", "age": 17},
    {"name": "Erin", "age": 30},
]


@pytest.fixture
async def ctx() -> AsyncGenerator[RequestContext, None]:
    connector = SQLAlchemyConnector(
        "sqlite+aiosqlite:///:memory:", Base, name="sqlite", poolclass=StaticPool
    )
    db = await connector.connect()
    assert db is not None
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    ddb = MongoHandle(AsyncMongoMockClient(), "godbms_it")
    yield RequestContext(db=db, ddb=ddb)
    await connector.disconnect()


@pytest.fixture(params=[EngineKind.RELATIONAL, EngineKind.DOCUMENT], ids=["sql", "mongo"])
async def people(request: pytest.FixtureRequest, ctx: RequestContext) -> BasicModel:
    model = BasicModel("people", ctx, engine=request.param)
    assert await model.create_many(ROWS) == {"count": len(ROWS)}
    return model


def _names(rows: list[dict]) -> list[str]:
    return [r["name"] for r in rows]


@pytest.mark.asyncio
class TestCrossEngine:
    async def test_client_filter_end_to_end(self, people: BasicModel) -> None:
        where = PEOPLE.compose_filter({"name": "Alice", "age": "gte|30", "other": "x"})
        assert where == {"name": "Alice", "age": {"gte": 30}}
        assert _names(await people.find_many(where)) == ["Alice"]

    async def test_page_and_sort(self, people: BasicModel) -> None:
        where = PEOPLE.compose_filter({"age": "gte|18"})
        sorter = PEOPLE.compose_sorter({"age": "desc", "password": "asc"})
        skip, take = PaginationParser().parse({"skip": "1", "take": "2"})
        rows = await people.find_many(where, sorter, skip, take)
        assert _names(rows) == ["Alice", "Erin"]

    async def test_date_filter(self, people: BasicModel) -> None:
        future = int(datetime(2999, 1, 1, tzinfo=timezone.utc).timestamp() * 1000)
        where = PEOPLE.compose_filter({"createdAt": f"lt|{future}"})
        assert await people.count(where) == len(ROWS)

    async def test_count_matches_find_many(self, people: BasicModel) -> None:
        total = await people.count()
        assert len(await people.find_many(None, None, 0, total)) == total

    async def test_count_matches_find_many_when_empty(
        self, people: BasicModel
    ) -> None:
        assert await people.delete_many() == {"count": len(ROWS)}
        total = await people.count()
        assert total == 0
        assert await people.find_many(None, None, 0, total) == []

    async def test_update_then_find(self, people: BasicModel) -> None:
        updated = await people.update({"name": "Bob"}, {"age": 26})
        assert updated is not None and updated["age"] == 26
        assert await people.update({"name": "Nobody"}, {"age": 1}) is None
        assert await people.update_many({"age": {"lt": 20}}, {"age": 20}) == {"count": 1}

    async def test_soft_delete_and_restore(self, people: BasicModel) -> None:
        deleted = await people.delete({"name": "Carol"})
        assert deleted is not None and deleted["deletedAt"] is not None
        assert await people.count() == len(ROWS) - 1
        assert await people.find_first("name", "Carol") is None
        assert await people.delete_many({"age": {"lt": 30}}) == {"count": 2}
        assert await people.count() == 2
        assert await people.restore() == {"count": 3}
        assert await people.count() == len(ROWS)

    async def test_malformed_read_raises(self, people: BasicModel) -> None:
        with pytest.raises(QueryError):
            await people.find_first({"age": {"between": [1, 2]}})

    async def test_malformed_mutation_returns_none(self, people: BasicModel) -> None:
        assert await people.update_many({"age": {"between": [1, 2]}}, {"age": 1}) is None
