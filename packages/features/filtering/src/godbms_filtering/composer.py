"""Turn untrusted client filter/sort maps into allow-listed query structures.

Client encoding::

    filter: {"name": "Alice", "age": "gte|30", "createdAt": "lt|1653340079100"}
    sorter: {"createdAt": "desc", "age": "asc"}

Only allow-listed fields survive composition, so nothing a client names can
reach a storage engine unless a resource explicitly permits it.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from godbms_core.engine import CREATED_AT
from godbms_core.operators import parse_direction

from .exceptions import FieldNotAllowedError, FilterParseError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

logger = logging.getLogger(__name__)

DEFAULT_SORTER: dict[str, str] = {CREATED_AT: "desc"}

EQUAL = "equal"
OPERATOR_SEPARATOR = "|"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")


def compose_sorter(
    sort_input: Mapping[str, Any] | None,
    allowed_fields: Iterable[str] | None = None,
    *,
    strict: bool = False,
) -> dict[str, str]:
    """Build a sort specification from client input.

    ``allowed_fields`` defaults to the fields of :data:`DEFAULT_SORTER`.
    Recognised pairs are returned in allow-list order. Empty input, or input
    with no recognised pair, yields the default sort whether or not its
    fields are allow-listed.
    """
    allowed = list(DEFAULT_SORTER) if allowed_fields is None else list(allowed_fields)
    sort_input = sort_input or {}

    rejected: dict[str, list[str]] = {}
    for field in sort_input:
        if field not in allowed:
            rejected.setdefault(field, []).append("not sortable")

    result: dict[str, str] = {}
    for field in allowed:
        if field not in sort_input:
            continue
        direction = parse_direction(sort_input[field])
        if direction is None:
            rejected.setdefault(field, []).append(
                f"invalid direction {sort_input[field]!r}; use 'asc' or 'desc'"
            )
            continue
        result[field] = direction.value

    if rejected:
        if strict:
            raise FieldNotAllowedError(rejected)
        logger.debug("compose_sorter dropped %s", sorted(rejected))

    if not result:
        return dict(DEFAULT_SORTER)
    return result


def compose_filter(
    filter_input: Mapping[str, Any] | None,
    allow_list: Mapping[str, Callable[[Any], Any]],
    *,
    strict: bool = False,
) -> dict[str, Any]:
    """Apply each allow-listed field's transform to the client's raw value.

    Fields absent from the input (or given as None) are left out entirely,
    so the engine receives no constraint for them. Input fields outside the
    allow-list never appear in the result.
    """
    filter_input = filter_input or {}

    unknown = [field for field in filter_input if field not in allow_list]
    if unknown:
        if strict:
            raise FieldNotAllowedError(
                {field: ["not filterable"] for field in unknown}
            )
        logger.debug("compose_filter dropped %s", sorted(unknown))

    result: dict[str, Any] = {}
    for field, transform in allow_list.items():
        raw = filter_input.get(field)
        if raw is None:
            continue
        result[field] = transform(raw)
    return result


def compose_filter_numeric(raw: Any, kind: str = "number") -> Any:
    """Decode ``"<operator>|<referenceValue>"`` into a filter value.

    >>> compose_filter_numeric("equal|42")
    42
    >>> compose_filter_numeric("gte|30")
    {'gte': 30}

    ``kind`` is ``"number"``, ``"date"`` (reference is epoch milliseconds) or
    ``"string"`` (reference kept verbatim). The operator is forwarded as-is;
    each engine rejects operators outside its vocabulary.
    """
    if not isinstance(raw, str):
        return raw
    if OPERATOR_SEPARATOR in raw:
        op, needle = raw.split(OPERATOR_SEPARATOR, 1)
        op = op.strip()
    else:
        op, needle = EQUAL, raw
    if not op:
        raise FilterParseError(f"Missing operator in {raw!r}")

    value = _parse_reference(needle, kind, raw)
    return value if op == EQUAL else {op: value}


def _parse_reference(needle: str, kind: str, raw: str) -> Any:
    if kind == "date":
        if not _INTEGER.fullmatch(needle):
            raise FilterParseError(
                f"Expected epoch milliseconds in {raw!r}, got {needle!r}"
            )
        try:
            return _EPOCH + timedelta(milliseconds=int(needle))
        except (OverflowError, ValueError) as e:
            raise FilterParseError(
                f"Epoch milliseconds out of range in {raw!r}"
            ) from e
    if kind == "number":
        return _parse_number(needle)
    if kind == "string":
        return needle
    raise ValueError(f"Unknown value kind {kind!r}")


def _parse_number(s: str) -> Any:
    # plain numerals only; anything else is compared as a string
    if not _DECIMAL.fullmatch(s):
        return s
    return float(s) if "." in s else int(s)
