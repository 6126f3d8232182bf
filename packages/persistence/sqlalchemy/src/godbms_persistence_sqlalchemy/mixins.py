"""
SQLAlchemy column mixins for the bookkeeping fields every store relies on.

``createdAt`` backs the default sort; ``deletedAt`` is required by
``delete``/``delete_many``, which only ever mark rows as deleted::

    class User(TimestampModelMixin, SoftDeleteModelMixin, Base):
        __tablename__ = "users"
        id: Mapped[int] = mapped_column(primary_key=True)
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampModelMixin:
    """Adds createdAt and updatedAt columns."""

    createdAt: Mapped[datetime] = mapped_column(  # noqa: N815
        DateTime(timezone=True), default=utcnow, index=True
    )
    updatedAt: Mapped[datetime] = mapped_column(  # noqa: N815
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class SoftDeleteModelMixin:
    """Adds the nullable deletedAt marker; NULL means the row is available."""

    deletedAt: Mapped[datetime | None] = mapped_column(  # noqa: N815
        DateTime(timezone=True), nullable=True, default=None, index=True
    )
