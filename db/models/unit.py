"""
db/models/unit.py

Unit model: one physical advertising location.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Unit(Base, TimestampMixin):
    """
    An advertising unit.

    ``id`` is the opaque key used by form edits and deletes; ``unit_id`` is
    the user-facing business identifier and the conflict key for bulk
    spreadsheet upserts.
    """

    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    unit_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="User-facing business identifier",
    )

    location: Mapped[str] = mapped_column(String(255), nullable=False)

    governorate: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Administrative region",
    )

    lat_lng: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment='Coordinate pair encoded as "<lat>,<lng>"',
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        UniqueConstraint("unit_id", name="uq_units_unit_id"),
        Index("ix_units_governorate", "governorate"),
        Index("ix_units_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Unit id={self.id} unit_id={self.unit_id!r} governorate={self.governorate!r}>"
