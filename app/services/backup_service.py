"""
app/services/backup_service.py

Full-data JSON backup and the "clear all data" operation.

Backup layout:

    {
        "units": [...],
        "campaigns": [...],
        "settings": {...} | null,
        "exported_at": "<ISO-8601>",
        "version": "1.0"
    }
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from db.base import utcnow
from db.models.campaign import Campaign
from db.models.unit import Unit
from db.models.user_settings import UserSettings
from db.repositories.campaign_repository import CampaignRepository
from db.repositories.settings_repository import SettingsRepository
from db.repositories.unit_repository import UnitRepository

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"


def _iso(value: datetime | date | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def serialize_unit(unit: Unit) -> dict[str, Any]:
    return {
        "id": str(unit.id),
        "unit_id": unit.unit_id,
        "location": unit.location,
        "governorate": unit.governorate,
        "lat_lng": unit.lat_lng,
        "created_at": _iso(unit.created_at),
        "updated_at": _iso(unit.updated_at),
    }


def serialize_campaign(campaign: Campaign) -> dict[str, Any]:
    return {
        "id": str(campaign.id),
        "name": campaign.name,
        "unit_ids": list(campaign.unit_ids or []),
        "export_url": campaign.export_url,
        "created_at": _iso(campaign.created_at),
        "updated_at": _iso(campaign.updated_at),
    }


def serialize_settings(settings: UserSettings | None) -> dict[str, Any] | None:
    if settings is None:
        return None
    return {
        "id": str(settings.id),
        "default_zoom": settings.default_zoom,
        "default_center_lat": settings.default_center_lat,
        "default_center_lng": settings.default_center_lng,
        "preferred_governorate": settings.preferred_governorate,
        "map_style": settings.map_style,
        "marker_style": settings.marker_style,
        "created_at": _iso(settings.created_at),
        "updated_at": _iso(settings.updated_at),
    }


def build_backup(
    units: Iterable[Unit],
    campaigns: Iterable[Campaign],
    settings: UserSettings | None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    return {
        "units": [serialize_unit(unit) for unit in units],
        "campaigns": [serialize_campaign(campaign) for campaign in campaigns],
        "settings": serialize_settings(settings),
        "exported_at": (now or utcnow()).isoformat(),
        "version": BACKUP_VERSION,
    }


def backup_filename(day: date) -> str:
    return f"unipole_backup_{day.isoformat()}.json"


class BackupService:
    def __init__(
        self,
        *,
        units: UnitRepository,
        campaigns: CampaignRepository,
        settings: SettingsRepository,
    ) -> None:
        self._units = units
        self._campaigns = campaigns
        self._settings = settings

    def export(self, *, now: datetime | None = None) -> tuple[str, dict[str, Any]]:
        """
        Return ``(filename, payload)`` for a full-data backup.
        """

        moment = now or utcnow()
        payload = build_backup(
            self._units.list_units(),
            self._campaigns.list_campaigns(),
            self._settings.get(),
            now=moment,
        )
        logger.info(
            "Backup exported units=%d campaigns=%d",
            len(payload["units"]),
            len(payload["campaigns"]),
        )
        return backup_filename(moment.date()), payload

    def clear_all_data(self) -> dict[str, int]:
        """
        Delete every campaign, then every unit. Settings are kept.
        """

        campaigns_deleted = self._campaigns.delete_all()
        units_deleted = self._units.delete_all()
        logger.warning("All data cleared campaigns=%d units=%d", campaigns_deleted, units_deleted)
        return {"campaigns_deleted": campaigns_deleted, "units_deleted": units_deleted}
