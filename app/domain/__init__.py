"""
app/domain package marker.
"""

from app.domain.coordinates import (
    format_coordinate_pair,
    is_valid_coordinate_pair,
    parse_coordinate_pair,
)
from app.domain.map_view import CampaignMapView, MapBounds, MapMarker, MapPreferences
from app.domain.unit import ConversionResult, FieldError, ImportResult, UnitInput

__all__ = [
    "CampaignMapView",
    "ConversionResult",
    "FieldError",
    "ImportResult",
    "MapBounds",
    "MapMarker",
    "MapPreferences",
    "UnitInput",
    "format_coordinate_pair",
    "is_valid_coordinate_pair",
    "parse_coordinate_pair",
]
