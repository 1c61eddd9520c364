"""
Repository for the single user settings record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select

from db.base import utcnow
from db.models.user_settings import UserSettings
from db.repositories.base import SessionRepository

SETTINGS_FIELDS: tuple[str, ...] = (
    "default_zoom",
    "default_center_lat",
    "default_center_lng",
    "preferred_governorate",
    "map_style",
    "marker_style",
)


class SettingsRepository(SessionRepository):
    def get(self) -> UserSettings | None:
        """
        Return the settings record, or None until one has been saved.
        """

        stmt = select(UserSettings).order_by(UserSettings.created_at).limit(1)
        with self._read("load settings"):
            return self._session.scalars(stmt).first()

    def upsert(self, values: Mapping[str, Any]) -> UserSettings:
        """
        Update the existing record in place, or create it on first save.
        """

        unknown = set(values) - set(SETTINGS_FIELDS)
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)}")

        record = self.get()
        with self._write("save settings"):
            if record is None:
                record = UserSettings(**values)
                self._session.add(record)
            else:
                for field_name, value in values.items():
                    setattr(record, field_name, value)
                record.updated_at = utcnow()
            self._session.flush()
        return record
