"""FieldAllowList — per-resource filterable and sortable fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from godbms_core.settings import get_settings

from .composer import DEFAULT_SORTER, compose_filter, compose_sorter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping


class FieldAllowList:
    """Allowed fields for one resource.

    ``filters`` maps each filterable field to the transform applied to the
    client's raw value; ``sortable`` lists the fields a client may sort on
    (defaults to the fields of the default sort). ``strict`` defaults to the
    ``STRICT_ALLOW_LIST`` setting::

        USERS = FieldAllowList(
            filters={"name": identity, "age": numeric, "createdAt": date},
            sortable=["createdAt", "age"],
        )
        where = USERS.compose_filter(params.get("filter"))
    """

    def __init__(
        self,
        *,
        filters: Mapping[str, Callable[[Any], Any]] | None = None,
        sortable: Iterable[str] | None = None,
        strict: bool | None = None,
    ) -> None:
        self._filters: dict[str, Callable[[Any], Any]] = dict(filters or {})
        self._sortable: tuple[str, ...] = tuple(
            DEFAULT_SORTER if sortable is None else sortable
        )
        self._strict = get_settings().strict_allow_list if strict is None else strict

    @property
    def filterable_fields(self) -> tuple[str, ...]:
        return tuple(self._filters)

    @property
    def sortable_fields(self) -> tuple[str, ...]:
        return self._sortable

    @property
    def strict(self) -> bool:
        return self._strict

    def compose_filter(self, filter_input: Mapping[str, Any] | None) -> dict[str, Any]:
        return compose_filter(filter_input, self._filters, strict=self._strict)

    def compose_sorter(self, sort_input: Mapping[str, Any] | None) -> dict[str, str]:
        return compose_sorter(sort_input, self._sortable, strict=self._strict)
