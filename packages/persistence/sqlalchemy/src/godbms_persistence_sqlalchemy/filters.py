"""Compile composed filter/sort specifications to SQLAlchemy clauses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, inspect, not_, or_

from godbms_core.operators import (
    FilterOperator,
    LogicalOperator,
    parse_direction,
    parse_operator,
    split_logical,
)

from .exceptions import SQLAlchemyQueryError
from .operators import SQLAlchemyOperatorRegistry, build_default_registry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

_DEFAULT_REGISTRY = build_default_registry()


def resolve_column(model_cls: type[Any], field: str) -> Any:
    """Return the mapped column attribute *field*; raise if the model lacks it."""
    if field not in inspect(model_cls).column_attrs:
        raise SQLAlchemyQueryError(f"{model_cls.__name__} has no column {field!r}")
    return getattr(model_cls, field)


def build_where(
    model_cls: type[Any],
    filter_spec: Mapping[str, Any] | None,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool] | None:
    """
    Build a WHERE clause from a filter specification.

    ``{"name": "Alice", "age": {"gte": 30}}`` becomes
    ``name = 'Alice' AND age >= 30``. Returns None for an empty filter.
    """
    if not filter_spec:
        return None
    if not isinstance(filter_spec, Mapping):
        raise SQLAlchemyQueryError(f"Filter must be a mapping, got {filter_spec!r}")
    registry = registry or _DEFAULT_REGISTRY

    fields, logical = split_logical(filter_spec)
    clauses: list[ColumnElement[bool]] = []
    for field, value in fields.items():
        column = resolve_column(model_cls, field)
        if isinstance(value, Mapping):
            clauses.extend(_compile_operators(registry, column, field, value))
        else:
            clauses.append(registry.apply(FilterOperator.EQUALS, column, value))

    for op, operand in logical.items():
        nested = [
            clause
            for clause in (
                build_where(model_cls, sub, registry) for sub in _sub_filters(op, operand)
            )
            if clause is not None
        ]
        if not nested:
            continue
        if op is LogicalOperator.AND:
            clauses.append(and_(*nested))
        elif op is LogicalOperator.OR:
            clauses.append(or_(*nested))
        else:
            clauses.append(not_(and_(*nested)))

    if not clauses:
        return None
    return clauses[0] if len(clauses) == 1 else and_(*clauses)


def _compile_operators(
    registry: SQLAlchemyOperatorRegistry,
    column: Any,
    field: str,
    operators: Mapping[str, Any],
) -> list[ColumnElement[bool]]:
    clauses = []
    for op_name, operand in operators.items():
        op = parse_operator(op_name)
        if op is None or not registry.has(op):
            raise SQLAlchemyQueryError(
                f"Unsupported operator {op_name!r} for field {field!r}"
            )
        clauses.append(registry.apply(op, column, operand))
    return clauses


def _sub_filters(op: LogicalOperator, operand: Any) -> list[Mapping[str, Any]]:
    if isinstance(operand, Mapping):
        return [operand]
    if isinstance(operand, (list, tuple)):
        return list(operand)
    raise SQLAlchemyQueryError(f"{op.value} expects a filter or a list of filters")


def build_order_by(
    model_cls: type[Any], sorter: Mapping[str, Any] | None
) -> list[ColumnElement[Any]]:
    """``{"createdAt": "desc"}`` -> ``[Model.createdAt.desc()]``."""
    if not sorter:
        return []
    order_by = []
    for field, raw_direction in sorter.items():
        column = resolve_column(model_cls, field)
        direction = parse_direction(raw_direction)
        if direction is None:
            raise SQLAlchemyQueryError(
                f"Invalid sort direction {raw_direction!r} for field {field!r}"
            )
        order_by.append(column.desc() if direction.value == "desc" else column.asc())
    return order_by
