"""Fixtures for the relational engine: in-memory aiosqlite behind a live handle."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from godbms_core import RequestContext
from godbms_persistence_sqlalchemy import (
    SoftDeleteModelMixin,
    SQLAlchemyConnector,
    SQLAlchemyHandle,
    TimestampModelMixin,
)

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


class Base(DeclarativeBase):
    pass


class User(TimestampModelMixin, SoftDeleteModelMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(120), unique=True)
    name: Mapped[str] = mapped_column(String(80))
    age: Mapped[int] = mapped_column(Integer, default=0)


class Tag(TimestampModelMixin, Base):
    """No deletedAt column: cannot be deleted through a store."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(40))


@pytest.fixture
def models() -> type[DeclarativeBase]:
    return Base


@pytest.fixture
async def connector() -> AsyncGenerator[SQLAlchemyConnector, None]:
    conn = SQLAlchemyConnector(SQLITE_URL, Base, name="sqlite", poolclass=StaticPool)
    yield conn
    await conn.disconnect()


@pytest.fixture
async def handle(connector: SQLAlchemyConnector) -> SQLAlchemyHandle:
    live = await connector.connect()
    assert live is not None
    async with live.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return live


@pytest.fixture
def ctx(handle: SQLAlchemyHandle) -> RequestContext:
    return RequestContext(db=handle)


@pytest.fixture
async def seeded(handle: SQLAlchemyHandle) -> SQLAlchemyHandle:
    await handle.store("users").create_many(
        [
            {"email": "alice@example.com", "name": "Alice", "age": 31},
            {"email": "bob@example.com", "name": "Bob", "age": 25},
            {"email": "carol@example.com", "name": "Carol", "age": 42},
            {"email": "dave@example.com", "name": "Dave", "age": 17},
        ]
    )
    return handle
