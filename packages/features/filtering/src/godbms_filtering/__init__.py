"""Client query composition — allow-listed filters, sorters, pagination."""

from __future__ import annotations

from .allow_list import FieldAllowList
from .composer import (
    DEFAULT_SORTER,
    compose_filter,
    compose_filter_numeric,
    compose_sorter,
)
from .exceptions import FieldNotAllowedError, FilterParseError
from .pagination import PaginationParser, PaginationResult
from .transforms import contains, date, identity, numeric

__all__ = [
    "DEFAULT_SORTER",
    "FieldAllowList",
    "FieldNotAllowedError",
    "FilterParseError",
    "PaginationParser",
    "PaginationResult",
    "compose_filter",
    "compose_filter_numeric",
    "compose_sorter",
    "contains",
    "date",
    "identity",
    "numeric",
]
