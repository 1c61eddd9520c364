"""
app/services/settings_service.py

Load and save the single map-preferences record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.config import get_map_default_settings
from app.domain.map_view import MapPreferences
from app.services.errors import SettingsValidationError
from app.validators.entity_validators import validate_map_settings
from db.repositories.settings_repository import SETTINGS_FIELDS, SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, repository: SettingsRepository, defaults: MapPreferences | None = None) -> None:
        self._repository = repository
        self._defaults = defaults or get_map_default_settings().to_preferences()

    def current(self) -> MapPreferences:
        """
        Return the saved preferences, or the configured defaults.
        """

        return MapPreferences.from_record(self._repository.get(), self._defaults)

    def save(self, changes: Mapping[str, Any]) -> MapPreferences:
        """
        Merge ``changes`` over the current preferences, validate, then store.

        Nothing is written when any field is invalid.
        """

        unknown = set(changes) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)}")

        current = self.current()
        values: dict[str, Any] = {
            "default_zoom": current.zoom,
            "default_center_lat": current.center_lat,
            "default_center_lng": current.center_lng,
            "preferred_governorate": current.preferred_governorate,
            "map_style": current.map_style,
            "marker_style": current.marker_style,
        }
        values.update(changes)

        errors = validate_map_settings(
            default_zoom=values["default_zoom"],
            default_center_lat=values["default_center_lat"],
            default_center_lng=values["default_center_lng"],
            map_style=values["map_style"],
            marker_style=values["marker_style"],
        )
        if errors:
            raise SettingsValidationError(errors)

        governorate = values["preferred_governorate"]
        if isinstance(governorate, str):
            governorate = governorate.strip() or None
        else:
            governorate = None
        values["preferred_governorate"] = governorate
        values["default_center_lat"] = float(values["default_center_lat"])
        values["default_center_lng"] = float(values["default_center_lng"])

        record = self._repository.upsert(values)
        logger.info(
            "Map settings saved zoom=%s center=%s,%s",
            record.default_zoom,
            record.default_center_lat,
            record.default_center_lng,
        )
        return MapPreferences.from_record(record, self._defaults)
