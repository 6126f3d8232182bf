"""Ready-made allow-list transforms."""

from __future__ import annotations

from typing import Any

from godbms_core.operators import FilterOperator

from .composer import compose_filter_numeric


def identity(value: Any) -> Any:
    """Exact match on the raw value."""
    return value


def numeric(value: Any) -> Any:
    """``"gte|30"`` -> ``{"gte": 30}``; ``"equal|42"`` -> ``42``."""
    return compose_filter_numeric(value, "number")


def date(value: Any) -> Any:
    """``"lt|1653340079100"`` -> ``{"lt": datetime(2022, 5, 23, ...)}``."""
    return compose_filter_numeric(value, "date")


def contains(value: Any) -> Any:
    """Substring match on a text field."""
    return {FilterOperator.CONTAINS.value: str(value)}
