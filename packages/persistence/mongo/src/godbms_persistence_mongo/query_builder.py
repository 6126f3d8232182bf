"""Mongo query builder from composed filter/sort specifications."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pymongo import ASCENDING, DESCENDING

from godbms_core.operators import (
    FilterOperator,
    LogicalOperator,
    SortDirection,
    parse_direction,
    parse_operator,
    split_logical,
)

from .exceptions import MongoQueryError
from .serialization import ID_FIELD, MONGO_ID, coerce_object_id, serialize_value

_MONGO_OP_MAP: dict[FilterOperator, str] = {
    FilterOperator.EQUALS: "$eq",
    FilterOperator.NOT: "$ne",
    FilterOperator.GT: "$gt",
    FilterOperator.GTE: "$gte",
    FilterOperator.LT: "$lt",
    FilterOperator.LTE: "$lte",
    FilterOperator.IN: "$in",
    FilterOperator.NOT_IN: "$nin",
}

_LOGICAL_MAP: dict[LogicalOperator, str] = {
    LogicalOperator.AND: "$and",
    LogicalOperator.OR: "$or",
    LogicalOperator.NOT: "$nor",
}


def _compile_text(op: FilterOperator, val: Any) -> dict[str, Any] | None:
    """Compile text operators to an anchored/unanchored ``$regex``."""
    pattern = re.escape(str(val))
    if op == FilterOperator.CONTAINS:
        return {"$regex": pattern}
    if op == FilterOperator.STARTS_WITH:
        return {"$regex": f"^{pattern}"}
    if op == FilterOperator.ENDS_WITH:
        return {"$regex": f"{pattern}$"}
    return None


class MongoQueryBuilder:
    """Compiles filter and sort specifications to MongoDB query documents.

    ``{"age": {"gte": 30}, "id": "65f..."}`` becomes
    ``{"age": {"$gte": 30}, "_id": ObjectId("65f...")}``. Only operators of
    :class:`FilterOperator` are accepted, and field names may not start with
    ``$``, so client input can never smuggle in query operators.
    """

    def field(self, name: Any) -> str:
        """Validate a field name and map ``id`` to ``_id``."""
        if not isinstance(name, str) or not name:
            raise MongoQueryError(f"Invalid field name {name!r}")
        if name.startswith("$") or "\x00" in name:
            raise MongoQueryError(f"Field name {name!r} is not allowed")
        return MONGO_ID if name == ID_FIELD else name

    def value(self, field: str, val: Any) -> Any:
        val = serialize_value(val)
        if field != MONGO_ID:
            return val
        if isinstance(val, list):
            return [coerce_object_id(v) for v in val]
        return coerce_object_id(val)

    def build_filter(self, filter_spec: Mapping[str, Any] | None) -> dict[str, Any]:
        """Build a query document; an empty filter matches everything."""
        if not filter_spec:
            return {}
        if not isinstance(filter_spec, Mapping):
            raise MongoQueryError(f"Filter must be a mapping, got {filter_spec!r}")
        fields, logical = split_logical(filter_spec)

        query: dict[str, Any] = {}
        for name, val in fields.items():
            field = self.field(name)
            if isinstance(val, Mapping):
                query[field] = self._compile_operators(field, val)
            else:
                query[field] = self.value(field, val)

        for op, operand in logical.items():
            compiled = (self.build_filter(f) for f in self._sub_filters(op, operand))
            nested = [q for q in compiled if q]
            if not nested:
                continue
            if op is LogicalOperator.NOT:
                query["$nor"] = [{"$and": nested}] if len(nested) > 1 else nested
            else:
                query[_LOGICAL_MAP[op]] = nested
        return query

    def _compile_operators(self, field: str, operators: Mapping[str, Any]) -> dict[str, Any]:
        compiled: dict[str, Any] = {}
        for op_name, operand in operators.items():
            op = parse_operator(op_name)
            if op is None:
                raise MongoQueryError(
                    f"Unsupported operator {op_name!r} for field {field!r}"
                )
            text = _compile_text(op, operand)
            if text is not None:
                compiled.update(text)
                continue
            mongo_op = _MONGO_OP_MAP[op]
            if op in (FilterOperator.IN, FilterOperator.NOT_IN) and not isinstance(
                operand, (list, tuple, set, frozenset)
            ):
                raise MongoQueryError(f"{op.value} requires a list of values")
            if isinstance(operand, (set, frozenset)):
                operand = list(operand)
            compiled[mongo_op] = self.value(field, operand)
        return compiled

    @staticmethod
    def _sub_filters(op: LogicalOperator, operand: Any) -> list[Mapping[str, Any]]:
        if isinstance(operand, Mapping):
            return [operand]
        if isinstance(operand, (list, tuple)):
            return list(operand)
        raise MongoQueryError(f"{op.value} expects a filter or a list of filters")

    def build_sort(self, sorter: Mapping[str, Any] | None) -> list[tuple[str, int]]:
        """``{"createdAt": "desc"}`` -> ``[("createdAt", -1)]``."""
        if not sorter:
            return []
        result: list[tuple[str, int]] = []
        for name, raw_direction in sorter.items():
            direction = parse_direction(raw_direction)
            if direction is None:
                raise MongoQueryError(
                    f"Invalid sort direction {raw_direction!r} for field {name!r}"
                )
            result.append(
                (
                    self.field(name),
                    DESCENDING if direction is SortDirection.DESC else ASCENDING,
                )
            )
        return result
