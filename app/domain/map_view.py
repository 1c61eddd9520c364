"""
app/domain/map_view.py

Value objects describing what the map widget renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_STYLE = "default"
SUPPORTED_MAP_STYLES: frozenset[str] = frozenset({DEFAULT_STYLE})
SUPPORTED_MARKER_STYLES: frozenset[str] = frozenset({DEFAULT_STYLE})


@dataclass(frozen=True)
class MapPreferences:
    """
    Effective map preferences, passed explicitly wherever a map is built.

    Comes from the single saved settings record when one exists, otherwise
    from configured defaults.
    """

    center_lat: float
    center_lng: float
    zoom: int
    preferred_governorate: str | None = None
    map_style: str = DEFAULT_STYLE
    marker_style: str = DEFAULT_STYLE
    saved: bool = False

    @property
    def center(self) -> tuple[float, float]:
        return self.center_lat, self.center_lng

    @classmethod
    def from_record(cls, record: Any | None, defaults: "MapPreferences") -> "MapPreferences":
        if record is None:
            return defaults
        return cls(
            center_lat=record.default_center_lat,
            center_lng=record.default_center_lng,
            zoom=record.default_zoom,
            preferred_governorate=record.preferred_governorate,
            map_style=record.map_style or DEFAULT_STYLE,
            marker_style=record.marker_style or DEFAULT_STYLE,
            saved=True,
        )


@dataclass(frozen=True)
class MapMarker:
    unit_id: str
    position: tuple[float, float]
    label: str
    location: str
    governorate: str
    selected: bool = False


@dataclass(frozen=True)
class MapBounds:
    south: float
    west: float
    north: float
    east: float


@dataclass(frozen=True)
class CampaignMapView:
    """
    Everything needed to render one campaign's shareable map.
    """

    campaign_id: str
    campaign_name: str
    center: tuple[float, float]
    zoom: int
    marker_style: str
    markers: list[MapMarker] = field(default_factory=list)
    bounds: MapBounds | None = None
    export_url: str | None = None
