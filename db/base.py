"""
db/base.py

Declarative base and shared mixins for all SQLAlchemy models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class.
    """

    # JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests and local dev).
    type_annotation_map: dict[type, Any] = {
        list[str]: JSON().with_variant(JSONB(), "postgresql"),
    }


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at to any model.

    Both are stamped by the application on INSERT (so rows created in the
    same second still order correctly) with a server default as fallback;
    updated_at is refreshed on every ORM UPDATE via onupdate.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
