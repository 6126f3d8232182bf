"""Record dict <-> BSON document round-trip (datetime, UUID, Decimal, ObjectId)."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from bson import Decimal128, ObjectId

ID_FIELD = "id"
MONGO_ID = "_id"


def serialize_value(value: Any) -> Any:
    """Convert Python types to BSON-safe types.

    Aware datetimes are stored as naive UTC, which is what the driver hands
    back on reads.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def deserialize_value(value: Any) -> Any:
    """Convert BSON types back to Python types."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: deserialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [deserialize_value(v) for v in value]
    return value


def coerce_object_id(value: Any) -> Any:
    """Turn a 24-hex-digit string into an ObjectId; leave anything else alone."""
    if isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


def record_to_doc(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a record payload to a BSON-ready document (``id`` -> ``_id``)."""
    doc = {k: serialize_value(v) for k, v in data.items()}
    if ID_FIELD in doc:
        doc[MONGO_ID] = coerce_object_id(doc.pop(ID_FIELD))
    return doc


def doc_to_record(doc: dict[str, Any]) -> dict[str, Any]:
    """Convert a BSON document to a record (``_id`` -> ``id``, ObjectId as str)."""
    record = deserialize_value(dict(doc))
    if MONGO_ID in record:
        oid = record.pop(MONGO_ID)
        record[ID_FIELD] = str(oid) if isinstance(oid, ObjectId) else oid
    return record
