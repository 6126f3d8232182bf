"""SQLAlchemyConnector — async engine lifecycle for the relational engine."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from godbms_core.engine import EngineKind

from .exceptions import SQLAlchemyConnectionError, SQLAlchemyQueryError
from .operators import SQLAlchemyOperatorRegistry, build_default_registry
from .store import SQLAlchemyStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
    from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class SQLAlchemyHandle:
    """Live relational handle: async engine, session factory and model lookup.

    Model names resolve against the declarative base by table name first,
    then by class name, both case-insensitively (``"users"`` or ``"User"``).
    """

    def __init__(
        self,
        engine: AsyncEngine,
        models: type[DeclarativeBase],
        *,
        operators: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._engine = engine
        self._models = models
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._operators = operators or build_default_registry()
        self._stores: dict[str, SQLAlchemyStore] = {}

    @property
    def kind(self) -> EngineKind:
        return EngineKind.RELATIONAL

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def models(self) -> type[DeclarativeBase]:
        return self._models

    @property
    def operators(self) -> SQLAlchemyOperatorRegistry:
        return self._operators

    def session(self) -> AsyncSession:
        return self._session_factory()

    def model(self, name: str) -> type[Any]:
        """Return the mapped class registered under *name*."""
        wanted = name.lower()
        by_class = None
        for mapper in self._models.registry.mappers:
            table = getattr(mapper.local_table, "name", None)
            if table is not None and table.lower() == wanted:
                return mapper.class_
            if mapper.class_.__name__.lower() == wanted:
                by_class = mapper.class_
        if by_class is None:
            raise SQLAlchemyQueryError(f"No mapped model named {name!r}")
        return by_class

    def store(self, model_name: str) -> SQLAlchemyStore:
        store = self._stores.get(model_name)
        if store is None:
            store = SQLAlchemyStore(self, self.model(model_name))
            self._stores[model_name] = store
        return store


class SQLAlchemyConnector:
    """Open and close the relational engine.

    ``connect()`` verifies the URL with a ``SELECT 1`` round trip. Failures are
    logged and reported as ``None`` so the process keeps serving requests
    that do not need this engine. Pooling is left to the async engine.
    """

    def __init__(
        self,
        url: str,
        models: type[DeclarativeBase],
        *,
        name: str = "sqlalchemy",
        operators: SQLAlchemyOperatorRegistry | None = None,
        **engine_kwargs: Any,
    ) -> None:
        self.name = name
        self._url = url
        self._models = models
        self._operators = operators
        self._engine_kwargs = engine_kwargs
        self._handle: SQLAlchemyHandle | None = None

    def __repr__(self) -> str:
        return f"SQLAlchemyConnector(name={self.name!r})"

    @property
    def kind(self) -> EngineKind:
        return EngineKind.RELATIONAL

    @property
    def handle(self) -> SQLAlchemyHandle | None:
        return self._handle

    async def _open(self) -> AsyncEngine:
        try:
            engine = create_async_engine(self._url, **self._engine_kwargs)
        except Exception as e:
            raise SQLAlchemyConnectionError(str(e)) from e
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            with contextlib.suppress(Exception):
                await engine.dispose()
            raise SQLAlchemyConnectionError(str(e)) from e
        return engine

    async def connect(self) -> SQLAlchemyHandle | None:
        """Create and cache the handle. Idempotent; None when unreachable."""
        if self._handle is not None:
            return self._handle
        try:
            engine = await self._open()
        except SQLAlchemyConnectionError:
            logger.exception("%s engine unavailable", self.name)
            return None
        self._handle = SQLAlchemyHandle(engine, self._models, operators=self._operators)
        logger.info("%s engine connected", self.name)
        return self._handle

    async def disconnect(self) -> None:
        """Dispose the engine's pool. Idempotent."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            await handle.engine.dispose()
        except Exception:  # noqa: BLE001
            logger.exception("Error while disconnecting %s engine", self.name)
            return
        logger.info("%s engine disconnected", self.name)
