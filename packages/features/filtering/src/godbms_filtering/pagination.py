"""PaginationParser — skip/take from client query params."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from godbms_core.engine import DEFAULT_LIMIT, DEFAULT_OFFSET

if TYPE_CHECKING:
    from godbms_core.settings import EngineSettings


class PaginationResult(NamedTuple):
    skip: int
    take: int


class PaginationParser:
    """Parse ``skip``/``take`` (or ``offset``/``limit``) into safe integers.

    Unparseable values fall back to the defaults; ``take`` is clamped to
    ``1..max_limit`` and ``skip`` to ``>= 0``.
    """

    def __init__(
        self,
        *,
        default_limit: int = DEFAULT_LIMIT,
        default_offset: int = DEFAULT_OFFSET,
        max_limit: int = 100,
    ) -> None:
        self._default_limit = default_limit
        self._default_offset = default_offset
        self._max_limit = max_limit

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> PaginationParser:
        return cls(
            default_limit=settings.default_limit,
            default_offset=settings.default_offset,
            max_limit=settings.max_limit,
        )

    def parse(
        self,
        query_params: dict[str, Any],
        *,
        skip_keys: tuple[str, ...] = ("skip", "offset"),
        take_keys: tuple[str, ...] = ("take", "limit"),
    ) -> PaginationResult:
        skip = self._int_param(query_params, skip_keys)
        skip = self._default_offset if skip is None else max(0, skip)
        take = self._int_param(query_params, take_keys)
        take = self._default_limit if take is None else take
        take = min(self._max_limit, max(1, take))
        return PaginationResult(skip=skip, take=take)

    def _int_param(self, params: dict[str, Any], keys: tuple[str, ...]) -> int | None:
        for key in keys:
            v = params.get(key)
            if v is None:
                continue
            try:
                return int(v)
            except (TypeError, ValueError):
                return None
        return None
