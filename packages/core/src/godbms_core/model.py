"""BasicModel — engine-agnostic CRUD over one named collection/table."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .engine import DEFAULT_LIMIT, DEFAULT_OFFSET, EngineKind
from .exceptions import QueryTimeoutError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from .context import RequestContext
    from .ports import CountResult, DataStore, FilterSpec, Record, SortSpec

logger = logging.getLogger(__name__)

R = TypeVar("R")

_UNSET: Any = object()


class BasicModel:
    """Uniform CRUD contract, identical on the relational and document engines.

    One instance per logical entity and request context::

        users = BasicModel("users", ctx)
        page = await users.find_many({"age": {"gte": 30}}, {"createdAt": "desc"})
        books = BasicModel("books", ctx, engine=EngineKind.DOCUMENT)

    Failure policy:

    - Reads (``count``, ``find_many``, ``find_first``, ``find_unique``)
      propagate engine errors to the caller.
    - Mutations catch engine errors (an unknown model name included), log
      them and return ``None``; callers must treat ``None`` as failure.
    - A missing handle on the context and task cancellation always
      propagate.
    """

    def __init__(
        self,
        model_name: str,
        ctx: RequestContext,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
        *,
        engine: EngineKind = EngineKind.RELATIONAL,
    ) -> None:
        if not model_name:
            raise ValueError("model_name must not be empty")
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}")
        self._model_name = model_name
        self._ctx = ctx
        self._limit = limit
        self._offset = offset
        self._engine = engine

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._model_name!r}, engine={self._engine.value}, "
            f"limit={self._limit}, offset={self._offset})"
        )

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def ctx(self) -> RequestContext:
        return self._ctx

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def engine(self) -> EngineKind:
        return self._engine

    # -- plumbing -----------------------------------------------------------

    def _store(self) -> DataStore:
        return self._ctx.handle(self._engine).store(self._model_name)

    async def _run(self, operation: str, awaitable: Awaitable[R]) -> R:
        timeout = self._ctx.timeout
        if timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError as e:
            raise QueryTimeoutError(
                f"BasicModel.{operation}({self._model_name})", timeout
            ) from e

    async def _read(self, operation: str, call: Callable[[DataStore], Awaitable[R]]) -> R:
        store = self._store()
        return await self._run(operation, call(store))

    async def _mutate(
        self, operation: str, call: Callable[[DataStore], Awaitable[R]]
    ) -> R | None:
        handle = self._ctx.handle(self._engine)
        try:
            store = handle.store(self._model_name)
            return await self._run(operation, call(store))
        except Exception:
            logger.exception(
                "BasicModel.%s(%s) failed", operation, self._model_name
            )
            return None

    # -- reads --------------------------------------------------------------

    async def count(self, filter: FilterSpec | None = None) -> int:
        logger.debug("BasicModel.count(%s): filter=%r", self._model_name, filter)
        return await self._read("count", lambda s: s.count(filter))

    async def find_many(
        self,
        filter: FilterSpec | None = None,
        sorter: SortSpec | None = None,
        skip: int | None = None,
        take: int | None = None,
    ) -> list[Record]:
        """Return one page of records; ``skip``/``take`` default to offset/limit.

        ``take=0`` yields an empty page without querying the engine.
        """
        skip = self._offset if skip is None else skip
        take = self._limit if take is None else take
        if skip < 0:
            raise ValueError(f"skip must not be negative, got {skip}")
        if take < 0:
            raise ValueError(f"take must not be negative, got {take}")
        logger.debug(
            "BasicModel.find_many(%s): filter=%r sorter=%r skip=%s take=%s",
            self._model_name,
            filter,
            sorter,
            skip,
            take,
        )
        if take == 0:
            self._store()
            return []
        return await self._read(
            "find_many", lambda s: s.find_many(filter, sorter, skip, take)
        )

    async def find_first(
        self, filter: FilterSpec | str | None = None, value: Any = _UNSET
    ) -> Record | None:
        """Return the first match in storage order.

        Accepts a filter, or a field name and value:
        ``find_first("email", "a@b.c")``.
        """
        if isinstance(filter, str):
            if value is _UNSET:
                raise TypeError("find_first(name, value) requires a value")
            filter = {filter: value}
        logger.debug("BasicModel.find_first(%s): filter=%r", self._model_name, filter)
        return await self._read("find_first", lambda s: s.find_first(filter))

    async def find_unique(self, name: str, value: Any) -> Record | None:
        """Look up one record by a primary-key or uniquely-indexed field."""
        logger.debug(
            "BasicModel.find_unique(%s): %s=%r", self._model_name, name, value
        )
        return await self._read("find_unique", lambda s: s.find_unique(name, value))

    # -- mutations ----------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> Record | None:
        logger.debug("BasicModel.create(%s): data=%r", self._model_name, data)
        return await self._mutate("create", lambda s: s.create(data))

    async def create_many(
        self, data: Sequence[Mapping[str, Any]]
    ) -> CountResult | None:
        logger.debug("BasicModel.create_many(%s): %d rows", self._model_name, len(data))
        return await self._mutate("create_many", lambda s: s.create_many(data))

    async def update(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> Record | None:
        """Update the first record matching *filter*; None if none matched."""
        logger.debug(
            "BasicModel.update(%s): filter=%r data=%r", self._model_name, filter, data
        )
        return await self._mutate("update", lambda s: s.update(filter, data))

    async def update_many(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> CountResult | None:
        logger.debug(
            "BasicModel.update_many(%s): filter=%r data=%r",
            self._model_name,
            filter,
            data,
        )
        return await self._mutate("update_many", lambda s: s.update_many(filter, data))

    async def delete(self, filter: FilterSpec | None = None) -> Record | None:
        """Mark the first match as deleted and return its snapshot.

        Records are only marked unavailable, never physically removed.
        """
        logger.debug("BasicModel.delete(%s): filter=%r", self._model_name, filter)
        return await self._mutate("delete", lambda s: s.delete(filter))

    async def delete_many(self, filter: FilterSpec | None = None) -> CountResult | None:
        """Mark every match as deleted. Records are never physically removed."""
        logger.debug("BasicModel.delete_many(%s): filter=%r", self._model_name, filter)
        return await self._mutate("delete_many", lambda s: s.delete_many(filter))

    async def restore(self, filter: FilterSpec | None = None) -> CountResult | None:
        """Make soft-deleted records matching *filter* available again."""
        logger.debug("BasicModel.restore(%s): filter=%r", self._model_name, filter)
        return await self._mutate("restore", lambda s: s.restore(filter))
