"""SQLAlchemyStore — the relational DataStore over one mapped model."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from sqlalchemy import UniqueConstraint, func, inspect, select, update

from godbms_core.engine import DELETED_AT

from .exceptions import SoftDeleteUnsupportedError, SQLAlchemyQueryError
from .filters import build_order_by, build_where, resolve_column
from .mixins import utcnow

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select

    from godbms_core.ports import CountResult, FilterSpec, Record, SortSpec

    from .connection import SQLAlchemyHandle

logger = logging.getLogger(__name__)


class SQLAlchemyStore:
    """
    CRUD over one declarative model through short-lived ``AsyncSession``\\ s.

    Each call opens its own session; mutations run in their own transaction
    and commit before returning. Records are returned as plain dicts of the
    model's column attributes.

    Rows whose ``deletedAt`` is set are invisible to every method except
    :meth:`restore`. Models without a ``deletedAt`` column cannot be deleted
    here at all.
    """

    def __init__(self, handle: SQLAlchemyHandle, model_cls: type[Any]) -> None:
        self._handle = handle
        self._model_cls = model_cls
        self._mapper = inspect(model_cls)
        self._soft_delete = (
            getattr(model_cls, DELETED_AT)
            if DELETED_AT in self._mapper.column_attrs
            else None
        )

    def __repr__(self) -> str:
        return f"SQLAlchemyStore({self._model_cls.__name__})"

    @property
    def model_cls(self) -> type[Any]:
        return self._model_cls

    # -- helpers ------------------------------------------------------------

    def _to_record(self, obj: Any) -> Record:
        return {attr.key: getattr(obj, attr.key) for attr in self._mapper.column_attrs}

    def _clauses(
        self, filter: FilterSpec | None, *, deleted: bool = False
    ) -> list[ColumnElement[bool]]:
        clauses = []
        where = build_where(self._model_cls, filter, self._handle.operators)
        if where is not None:
            clauses.append(where)
        if self._soft_delete is not None:
            clauses.append(
                self._soft_delete.is_not(None) if deleted else self._soft_delete.is_(None)
            )
        return clauses

    def _select(self, filter: FilterSpec | None) -> Select[Any]:
        return select(self._model_cls).where(*self._clauses(filter))

    def _values(self, data: Mapping[str, Any]) -> dict[str, Any]:
        values = dict(data)
        for field in values:
            resolve_column(self._model_cls, field)
        return values

    def _require_soft_delete(self) -> None:
        if self._soft_delete is None:
            raise SoftDeleteUnsupportedError(
                f"{self._model_cls.__name__} has no {DELETED_AT!r} column; "
                "records are never deleted physically"
            )

    def _unique_column(self, name: str) -> Any:
        attr = resolve_column(self._model_cls, name)
        column = self._mapper.column_attrs[name].columns[0]
        if column.primary_key or column.unique:
            return attr
        table = column.table
        candidates = [
            *(c for c in table.constraints if isinstance(c, UniqueConstraint)),
            *(i for i in table.indexes if i.unique),
        ]
        for candidate in candidates:
            cols = list(candidate.columns)
            if len(cols) == 1 and cols[0] is column:
                return attr
        raise SQLAlchemyQueryError(
            f"{self._model_cls.__name__}.{name} is not a unique field"
        )

    def _coerce(self, name: str, value: Any) -> Any:
        """Numeric coercion for lookups by numeric columns (``"7"`` -> ``7``)."""
        column = self._mapper.column_attrs[name].columns[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return value
        if not isinstance(value, str) or python_type not in (int, float, Decimal):
            return value
        try:
            return python_type(value.strip())
        except (ValueError, InvalidOperation) as e:
            raise SQLAlchemyQueryError(
                f"{self._model_cls.__name__}.{name} expects a number, got {value!r}"
            ) from e

    async def _first(self, session: Any, filter: FilterSpec | None) -> Any:
        result = await session.execute(self._select(filter).limit(1))
        return result.scalars().first()

    # -- reads --------------------------------------------------------------

    async def count(self, filter: FilterSpec | None = None) -> int:
        stmt = (
            select(func.count())
            .select_from(self._model_cls)
            .where(*self._clauses(filter))
        )
        async with self._handle.session() as session:
            return int(await session.scalar(stmt) or 0)

    async def find_many(
        self,
        filter: FilterSpec | None,
        sorter: SortSpec | None,
        skip: int,
        take: int,
    ) -> list[Record]:
        stmt = (
            self._select(filter)
            .order_by(*build_order_by(self._model_cls, sorter))
            .offset(skip)
            .limit(take)
        )
        async with self._handle.session() as session:
            result = await session.execute(stmt)
            return [self._to_record(obj) for obj in result.scalars().all()]

    async def find_first(self, filter: FilterSpec | None = None) -> Record | None:
        async with self._handle.session() as session:
            obj = await self._first(session, filter)
            return None if obj is None else self._to_record(obj)

    async def find_unique(self, name: str, value: Any) -> Record | None:
        column = self._unique_column(name)
        stmt = select(self._model_cls).where(
            column == self._coerce(name, value), *self._clauses(None)
        )
        async with self._handle.session() as session:
            result = await session.execute(stmt)
            obj = result.scalars().one_or_none()
            return None if obj is None else self._to_record(obj)

    # -- mutations ----------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> Record:
        async with self._handle.session() as session, session.begin():
            obj = self._model_cls(**self._values(data))
            session.add(obj)
            await session.flush()
            await session.refresh(obj)
            return self._to_record(obj)

    async def create_many(self, data: Sequence[Mapping[str, Any]]) -> CountResult:
        async with self._handle.session() as session, session.begin():
            objs = [self._model_cls(**self._values(item)) for item in data]
            session.add_all(objs)
            await session.flush()
            return {"count": len(objs)}

    async def update(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> Record | None:
        values = self._values(data)
        async with self._handle.session() as session, session.begin():
            obj = await self._first(session, filter)
            if obj is None:
                logger.warning("%r: no record matches %r; nothing updated", self, filter)
                return None
            for key, value in values.items():
                setattr(obj, key, value)
            await session.flush()
            await session.refresh(obj)
            return self._to_record(obj)

    async def update_many(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> CountResult:
        values = self._values(data)
        if not values:
            raise SQLAlchemyQueryError("update_many requires at least one field")
        return await self._bulk_update(self._clauses(filter), values)

    async def delete(self, filter: FilterSpec | None = None) -> Record | None:
        self._require_soft_delete()
        async with self._handle.session() as session, session.begin():
            obj = await self._first(session, filter)
            if obj is None:
                return None
            setattr(obj, DELETED_AT, utcnow())
            await session.flush()
            await session.refresh(obj)
            return self._to_record(obj)

    async def delete_many(self, filter: FilterSpec | None = None) -> CountResult:
        self._require_soft_delete()
        return await self._bulk_update(self._clauses(filter), {DELETED_AT: utcnow()})

    async def restore(self, filter: FilterSpec | None = None) -> CountResult:
        self._require_soft_delete()
        return await self._bulk_update(
            self._clauses(filter, deleted=True), {DELETED_AT: None}
        )

    async def _bulk_update(
        self, clauses: list[ColumnElement[bool]], values: dict[str, Any]
    ) -> CountResult:
        stmt = (
            update(self._model_cls)
            .where(*clauses)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        async with self._handle.session() as session, session.begin():
            result = await session.execute(stmt)
            return {"count": result.rowcount}
