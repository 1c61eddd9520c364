"""
app/validators/entity_validators.py

Field-level validation rules for units and campaigns.

Every validator runs all of its checks and returns the violations in field
order; an empty list means the input is valid. Nothing here raises.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Mapping
from typing import Any

from app.domain.coordinates import LATITUDE_RANGE, LONGITUDE_RANGE, is_valid_coordinate_pair
from app.domain.map_view import SUPPORTED_MAP_STYLES, SUPPORTED_MARKER_STYLES
from app.domain.unit import FieldError

CAMPAIGN_NAME_MIN_LENGTH = 3
CAMPAIGN_NAME_MAX_LENGTH = 100

UNIT_FIELD_MESSAGES: tuple[tuple[str, str], ...] = (
    ("unit_id", "Unit ID is required"),
    ("location", "Location is required"),
    ("governorate", "Governorate is required"),
)
COORDINATES_MESSAGE = "Valid coordinates are required (format: latitude,longitude)"


def _is_blank_text(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_unit(unit: Mapping[str, Any]) -> list[FieldError]:
    """
    Validate a (possibly partial) unit mapping.
    """

    errors: list[FieldError] = []

    for field_name, message in UNIT_FIELD_MESSAGES:
        if _is_blank_text(unit.get(field_name)):
            errors.append(FieldError(field=field_name, message=message))

    if not is_valid_coordinate_pair(unit.get("lat_lng")):
        errors.append(FieldError(field="lat_lng", message=COORDINATES_MESSAGE))

    return errors


def validate_campaign_name(name: Any) -> list[FieldError]:
    if _is_blank_text(name):
        return [FieldError(field="name", message="Campaign name is required")]

    length = len(name.strip())
    if length < CAMPAIGN_NAME_MIN_LENGTH:
        return [
            FieldError(
                field="name",
                message=f"Campaign name must be at least {CAMPAIGN_NAME_MIN_LENGTH} characters long",
            )
        ]
    if length > CAMPAIGN_NAME_MAX_LENGTH:
        return [
            FieldError(
                field="name",
                message=f"Campaign name must be at most {CAMPAIGN_NAME_MAX_LENGTH} characters long",
            )
        ]
    return []


def validate_unit_selection(unit_ids: Collection[Any] | None) -> list[FieldError]:
    if not unit_ids:
        return [FieldError(field="unit_ids", message="At least one unit must be selected")]
    return []


def validate_campaign(name: Any, unit_ids: Collection[Any] | None) -> list[FieldError]:
    """
    Run the name and unit-selection checks together.
    """

    return [*validate_campaign_name(name), *validate_unit_selection(unit_ids)]


def _in_range(value: Any, bounds: tuple[float, float]) -> bool:
    if isinstance(value, bool):
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and bounds[0] <= number <= bounds[1]


def validate_map_settings(
    *,
    default_zoom: Any,
    default_center_lat: Any,
    default_center_lng: Any,
    map_style: Any,
    marker_style: Any,
) -> list[FieldError]:
    errors: list[FieldError] = []

    if isinstance(default_zoom, bool) or not isinstance(default_zoom, int) or not 1 <= default_zoom <= 20:
        errors.append(FieldError(field="default_zoom", message="Zoom level must be between 1 and 20"))

    if not (
        _in_range(default_center_lat, LATITUDE_RANGE)
        and _in_range(default_center_lng, LONGITUDE_RANGE)
    ):
        errors.append(FieldError(field="coordinates", message="Invalid coordinates"))

    if map_style not in SUPPORTED_MAP_STYLES:
        errors.append(FieldError(field="map_style", message=f"Unsupported map style: {map_style}"))
    if marker_style not in SUPPORTED_MARKER_STYLES:
        errors.append(FieldError(field="marker_style", message=f"Unsupported marker style: {marker_style}"))

    return errors
