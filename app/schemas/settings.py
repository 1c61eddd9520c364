"""
app/schemas/settings.py

Schemas for the map preferences endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class MapSettingsRequest(BaseModel):
    """
    Partial update; omitted fields keep their current values.
    """

    default_zoom: int | None = None
    default_center_lat: float | None = None
    default_center_lng: float | None = None
    preferred_governorate: str | None = None
    map_style: str | None = None
    marker_style: str | None = None


class MapSettingsResponse(BaseModel):
    default_zoom: int
    default_center_lat: float
    default_center_lng: float
    preferred_governorate: str | None = None
    map_style: str
    marker_style: str
    saved: bool
