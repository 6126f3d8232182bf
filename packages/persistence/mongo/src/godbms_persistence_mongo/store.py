"""MongoStore — the document DataStore over one collection."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pymongo import ReturnDocument

from godbms_core.engine import CREATED_AT, DELETED_AT, UPDATED_AT

from .exceptions import MongoQueryError
from .query_builder import MongoQueryBuilder
from .serialization import doc_to_record, record_to_doc, serialize_value

if TYPE_CHECKING:
    from godbms_core.ports import CountResult, FilterSpec, Record, SortSpec

logger = logging.getLogger(__name__)

_VISIBLE: dict[str, Any] = {DELETED_AT: None}
_DELETED: dict[str, Any] = {DELETED_AT: {"$ne": None}}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoStore:
    """CRUD over one Motor collection.

    Documents carry ``createdAt``/``updatedAt``/``deletedAt`` stamped by the
    store. ``delete``/``delete_many`` set ``deletedAt``; documents with it
    set are hidden from every method except :meth:`restore`.
    """

    def __init__(
        self,
        collection: Any,
        *,
        query_builder: MongoQueryBuilder | None = None,
    ) -> None:
        self._collection = collection
        self._query_builder = query_builder or MongoQueryBuilder()

    def __repr__(self) -> str:
        return f"MongoStore({getattr(self._collection, 'name', '?')})"

    @property
    def collection(self) -> Any:
        return self._collection

    # -- helpers ------------------------------------------------------------

    def _match(
        self, filter: FilterSpec | None, *, deleted: bool = False
    ) -> dict[str, Any]:
        query = self._query_builder.build_filter(filter)
        marker = _DELETED if deleted else _VISIBLE
        if not query:
            return dict(marker)
        return {"$and": [query, marker]}

    def _payload(self, data: Mapping[str, Any]) -> dict[str, Any]:
        for key in data:
            self._query_builder.field(key)
        return record_to_doc(dict(data))

    def _new_doc(self, data: Mapping[str, Any], now: datetime) -> dict[str, Any]:
        doc = self._payload(data)
        stamp = serialize_value(now)
        doc.setdefault(CREATED_AT, stamp)
        doc.setdefault(UPDATED_AT, stamp)
        doc.setdefault(DELETED_AT, None)
        return doc

    def _set(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {"$set": self._payload({**data, UPDATED_AT: _now()})}

    # -- reads --------------------------------------------------------------

    async def count(self, filter: FilterSpec | None = None) -> int:
        return int(await self._collection.count_documents(self._match(filter)))

    async def find_many(
        self,
        filter: FilterSpec | None,
        sorter: SortSpec | None,
        skip: int,
        take: int,
    ) -> list[Record]:
        sort = self._query_builder.build_sort(sorter)
        cursor = self._collection.find(
            self._match(filter), sort=sort or None, skip=skip, limit=take
        )
        return [doc_to_record(doc) async for doc in cursor]

    async def find_first(self, filter: FilterSpec | None = None) -> Record | None:
        doc = await self._collection.find_one(self._match(filter))
        return None if doc is None else doc_to_record(doc)

    async def find_unique(self, name: str, value: Any) -> Record | None:
        return await self.find_first({name: value})

    # -- mutations ----------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> Record:
        doc = self._new_doc(data, _now())
        result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc_to_record(doc)

    async def create_many(self, data: Sequence[Mapping[str, Any]]) -> CountResult:
        if not data:
            return {"count": 0}
        now = _now()
        docs = [self._new_doc(item, now) for item in data]
        result = await self._collection.insert_many(docs)
        return {"count": len(result.inserted_ids)}

    async def update(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> Record | None:
        doc = await self._collection.find_one_and_update(
            self._match(filter),
            self._set(data),
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            logger.warning("%r: no document matches %r; nothing updated", self, filter)
            return None
        return doc_to_record(doc)

    async def update_many(
        self, filter: FilterSpec | None, data: Mapping[str, Any]
    ) -> CountResult:
        if not data:
            raise MongoQueryError("update_many requires at least one field")
        result = await self._collection.update_many(
            self._match(filter), self._set(data)
        )
        return {"count": result.matched_count}

    async def delete(self, filter: FilterSpec | None = None) -> Record | None:
        doc = await self._collection.find_one_and_update(
            self._match(filter),
            self._set({DELETED_AT: _now()}),
            return_document=ReturnDocument.AFTER,
        )
        return None if doc is None else doc_to_record(doc)

    async def delete_many(self, filter: FilterSpec | None = None) -> CountResult:
        result = await self._collection.update_many(
            self._match(filter), self._set({DELETED_AT: _now()})
        )
        return {"count": result.matched_count}

    async def restore(self, filter: FilterSpec | None = None) -> CountResult:
        result = await self._collection.update_many(
            self._match(filter, deleted=True), self._set({DELETED_AT: None})
        )
        return {"count": result.matched_count}
