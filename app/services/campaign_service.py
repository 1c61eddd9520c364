"""
app/services/campaign_service.py

Campaign validation, unit resolution and shareable map views.

Campaigns reference units by opaque id. A referenced unit may have been
deleted since the campaign was saved; such references resolve to nothing
rather than to an error.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from app.domain.coordinates import parse_coordinate_pair
from app.domain.map_view import CampaignMapView, MapBounds, MapMarker, MapPreferences
from app.services.backup_service import serialize_campaign, serialize_unit
from app.services.errors import CampaignValidationError
from app.validators.entity_validators import validate_campaign
from db.base import utcnow
from db.models.campaign import Campaign
from db.models.unit import Unit
from db.repositories.campaign_repository import CampaignRepository
from db.repositories.unit_repository import UnitRepository

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def resolve_campaign_units(campaign: Campaign, units: Iterable[Unit]) -> list[Unit]:
    """
    Return the units a campaign references, dropping dangling references.
    """

    wanted = {str(unit_pk) for unit_pk in campaign.unit_ids or []}
    return [unit for unit in units if str(unit.id) in wanted]


def build_campaign_map_view(
    campaign: Campaign,
    units: Iterable[Unit],
    preferences: MapPreferences,
) -> CampaignMapView:
    """
    Build the map for one campaign.

    Units whose coordinates do not parse get no marker. Center, zoom and
    marker style come from ``preferences``.
    """

    markers: list[MapMarker] = []
    for unit in resolve_campaign_units(campaign, units):
        position = parse_coordinate_pair(unit.lat_lng)
        if position is None:
            logger.warning("Skipping marker for unit_id=%r with invalid coordinates %r", unit.unit_id, unit.lat_lng)
            continue
        markers.append(
            MapMarker(
                unit_id=unit.unit_id,
                position=position,
                label=unit.unit_id,
                location=unit.location,
                governorate=unit.governorate,
                selected=True,
            )
        )

    return CampaignMapView(
        campaign_id=str(campaign.id),
        campaign_name=campaign.name,
        center=preferences.center,
        zoom=preferences.zoom,
        marker_style=preferences.marker_style,
        markers=markers,
        bounds=marker_bounds(markers),
        export_url=campaign.export_url,
    )


def marker_bounds(markers: Sequence[MapMarker]) -> MapBounds | None:
    if not markers:
        return None
    lats = [marker.position[0] for marker in markers]
    lngs = [marker.position[1] for marker in markers]
    return MapBounds(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))


def campaign_export_url(base_url: str, campaign_pk: uuid.UUID) -> str:
    return f"{base_url.rstrip('/')}/campaigns/{campaign_pk}/map"


def campaign_download_filename(name: str) -> str:
    return f"{_NON_ALPHANUMERIC.sub('_', name).lower()}_data.json"


class CampaignService:
    def __init__(self, campaigns: CampaignRepository, units: UnitRepository) -> None:
        self._campaigns = campaigns
        self._units = units

    def list_campaigns(self) -> list[Campaign]:
        return self._campaigns.list_campaigns()

    def get_campaign(self, campaign_pk: uuid.UUID) -> Campaign:
        return self._campaigns.get(campaign_pk)

    def create_campaign(self, payload: Mapping[str, Any]) -> Campaign:
        name, unit_ids = self._validated(payload)
        campaign = self._campaigns.create(name=name, unit_ids=unit_ids)
        logger.info("Campaign created id=%s units=%d", campaign.id, len(unit_ids))
        return campaign

    def update_campaign(self, campaign_pk: uuid.UUID, payload: Mapping[str, Any]) -> Campaign:
        name, unit_ids = self._validated(payload)
        campaign = self._campaigns.update(campaign_pk, {"name": name, "unit_ids": unit_ids})
        logger.info("Campaign updated id=%s units=%d", campaign.id, len(unit_ids))
        return campaign

    def delete_campaign(self, campaign_pk: uuid.UUID) -> None:
        self._campaigns.delete(campaign_pk)
        logger.info("Campaign deleted id=%s", campaign_pk)

    def campaign_units(self, campaign: Campaign) -> list[Unit]:
        return resolve_campaign_units(campaign, self._units.get_many(campaign.unit_ids or []))

    def build_map_view(self, campaign_pk: uuid.UUID, preferences: MapPreferences) -> CampaignMapView:
        campaign = self._campaigns.get(campaign_pk)
        return build_campaign_map_view(campaign, self._units.get_many(campaign.unit_ids or []), preferences)

    def publish_campaign(self, campaign_pk: uuid.UUID, base_url: str) -> Campaign:
        """
        Store and return the shareable map URL for a campaign.
        """

        campaign = self._campaigns.get(campaign_pk)
        url = campaign_export_url(base_url, campaign.id)
        campaign = self._campaigns.update(campaign_pk, {"export_url": url})
        logger.info("Campaign published id=%s export_url=%s", campaign.id, url)
        return campaign

    def build_download(self, campaign_pk: uuid.UUID, *, now: datetime | None = None) -> tuple[str, dict[str, Any]]:
        """
        Return ``(filename, payload)`` for a campaign's JSON data download.
        """

        campaign = self._campaigns.get(campaign_pk)
        payload = {
            "campaign": serialize_campaign(campaign),
            "units": [serialize_unit(unit) for unit in self.campaign_units(campaign)],
            "exported_at": (now or utcnow()).isoformat(),
        }
        return campaign_download_filename(campaign.name), payload

    @staticmethod
    def _validated(payload: Mapping[str, Any]) -> tuple[str, list[str]]:
        name = payload.get("name")
        raw_ids = payload.get("unit_ids") or []
        unit_ids = list(dict.fromkeys(str(unit_id) for unit_id in raw_ids))

        errors = validate_campaign(name, unit_ids)
        if errors:
            raise CampaignValidationError(errors)
        return name.strip(), unit_ids
