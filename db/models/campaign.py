"""
db/models/campaign.py

Campaign model: a named set of unit references for a shareable map.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Campaign(Base, TimestampMixin):
    """
    unit_ids holds Unit.id values as strings. There is no foreign key:
    referenced units may be deleted later and readers must tolerate that.
    """

    __tablename__ = "campaigns"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_ids: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    export_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Shareable map URL, set once published",
    )

    __table_args__ = (Index("ix_campaigns_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<Campaign id={self.id} name={self.name!r} units={len(self.unit_ids or [])}>"
