"""
db/models/user_settings.py

Single-row map preference record.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Float, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class UserSettings(Base, TimestampMixin):
    __tablename__ = "user_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    default_zoom: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    default_center_lat: Mapped[float] = mapped_column(Float, nullable=False)
    default_center_lng: Mapped[float] = mapped_column(Float, nullable=False)
    preferred_governorate: Mapped[str | None] = mapped_column(String(100), nullable=True)
    map_style: Mapped[str] = mapped_column(String(50), nullable=False, default="default")
    marker_style: Mapped[str] = mapped_column(String(50), nullable=False, default="default")
