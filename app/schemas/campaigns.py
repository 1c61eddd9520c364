"""
app/schemas/campaigns.py

Request and response schemas for campaign endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.units import UnitResponse


class CampaignRequest(BaseModel):
    name: str = ""
    unit_ids: list[str] = Field(default_factory=list)


class CampaignResponse(BaseModel):
    id: uuid.UUID
    name: str
    unit_ids: list[str]
    export_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CampaignDetailResponse(CampaignResponse):
    """
    Campaign plus the units it still references.
    """

    units: list[UnitResponse] = Field(default_factory=list)


class MapMarkerResponse(BaseModel):
    unit_id: str
    lat: float
    lng: float
    label: str
    location: str
    governorate: str
    selected: bool


class MapBoundsResponse(BaseModel):
    south: float
    west: float
    north: float
    east: float

    model_config = {"from_attributes": True}


class CampaignMapResponse(BaseModel):
    campaign_id: str
    campaign_name: str
    center_lat: float
    center_lng: float
    zoom: int
    marker_style: str
    unit_count: int = Field(..., ge=0)
    markers: list[MapMarkerResponse] = Field(default_factory=list)
    bounds: MapBoundsResponse | None = None
    export_url: str | None = None
