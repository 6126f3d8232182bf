"""Filtering package exceptions."""

from __future__ import annotations

from godbms_core.exceptions import ValidationError


class FilterParseError(ValidationError):
    """Raised when an encoded filter value such as ``"gte|30"`` is malformed."""


class FieldNotAllowedError(ValidationError):
    """Raised in strict mode when a field is outside the allow-list."""
