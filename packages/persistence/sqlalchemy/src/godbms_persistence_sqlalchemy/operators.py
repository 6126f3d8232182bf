"""
SQLAlchemy operator compilation strategy.

Provides the ``SQLAlchemyOperator`` interface, a registry keyed by
:class:`FilterOperator`, and the built-in comparison operators.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, cast

from godbms_core.operators import FilterOperator

from .exceptions import SQLAlchemyQueryError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a filter operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A SQLAlchemy column or instrumented attribute.
            value: The operand from the filter specification.

        Returns:
            A SQLAlchemy boolean expression.
        """
        ...


class SQLAlchemyOperatorRegistry:
    """Registry of ``SQLAlchemyOperator`` instances keyed by :class:`FilterOperator`."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        for op in operators:
            self.register(op)

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def apply(self, name: FilterOperator, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            SQLAlchemyQueryError: If the operator is not registered.
        """
        operator = self._operators.get(name)
        if operator is None:
            raise SQLAlchemyQueryError(f"Unsupported operator: {name.value}")
        return operator.apply(column, value)


class EqualsOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQUALS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_(None))
        return cast("ColumnElement[bool]", op_module.eq(column, value))


class NotOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is None:
            return cast("ColumnElement[bool]", column.is_not(None))
        return cast("ColumnElement[bool]", op_module.ne(column, value))


class GreaterThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.gt(column, value))


class GreaterEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GTE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ge(column, value))


class LessThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.lt(column, value))


class LessEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LTE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.le(column, value))


class InOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(_as_list(value, "in")))


class NotInOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.not_in(_as_list(value, "notIn")))


class ContainsOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.contains(str(value), autoescape=True))


class StartsWithOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.STARTS_WITH

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast(
            "ColumnElement[bool]", column.startswith(str(value), autoescape=True)
        )


class EndsWithOperator(SQLAlchemyOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ENDS_WITH

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.endswith(str(value), autoescape=True))


def _as_list(value: Any, op_name: str) -> list[Any]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise SQLAlchemyQueryError(f"{op_name} requires a list of values")
    return list(value)


def build_default_registry() -> SQLAlchemyOperatorRegistry:
    """Registry holding every built-in operator."""
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        EqualsOperator(),
        NotOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        InOperator(),
        NotInOperator(),
        ContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
    )
    return registry
