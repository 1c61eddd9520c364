"""
app/schemas/units.py

Request and response schemas for unit endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class UnitRequest(BaseModel):
    """
    Full unit payload for create and update. Field rules are checked by the
    unit validator so every violation is reported together.
    """

    unit_id: str = ""
    location: str = ""
    governorate: str = ""
    lat_lng: str = Field(default="", description='Coordinate pair as "<lat>,<lng>".')


class UnitResponse(BaseModel):
    id: uuid.UUID
    unit_id: str
    location: str
    governorate: str
    lat_lng: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
