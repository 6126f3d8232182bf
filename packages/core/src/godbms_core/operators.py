"""Filter operator vocabulary understood by every store.

A filter value is either a literal (exact match) or an operator map such as
``{"gte": 30}``. Logical keys combine whole filters::

    {"OR": [{"name": "Alice"}, {"age": {"lt": 18}}]}
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class FilterOperator(str, Enum):
    """Comparison operators accepted inside an operator map."""

    EQUALS = "equals"
    NOT = "not"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NOT_IN = "notIn"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class LogicalOperator(str, Enum):
    """Top-level keys that combine filters."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def parse_operator(name: str) -> FilterOperator | None:
    """Return the operator called *name*, or None if the vocabulary lacks it."""
    try:
        return FilterOperator(name)
    except ValueError:
        return None


def parse_direction(value: object) -> SortDirection | None:
    """Normalise ``"ASC"``/``"desc"``/... to a direction, or None if invalid."""
    if not isinstance(value, str):
        return None
    try:
        return SortDirection(value.strip().lower())
    except ValueError:
        return None


def split_logical(
    filter_spec: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[LogicalOperator, Any]]:
    """Separate field conditions from ``AND``/``OR``/``NOT`` entries."""
    fields: dict[str, Any] = {}
    logical: dict[LogicalOperator, Any] = {}
    for key, value in filter_spec.items():
        try:
            logical[LogicalOperator(key)] = value
        except ValueError:
            fields[key] = value
    return fields, logical
