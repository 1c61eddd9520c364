"""
tests/test_campaign_service.py

Campaign validation, dangling unit references and map views.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from app.domain.map_view import MapPreferences
from app.domain.unit import UnitInput
from app.services.campaign_service import (
    CampaignService,
    campaign_download_filename,
    campaign_export_url,
)
from app.services.errors import CampaignValidationError
from db.repositories.campaign_repository import CampaignRepository
from db.repositories.errors import CampaignNotFoundError
from db.repositories.unit_repository import UnitRepository

PREFERENCES = MapPreferences(center_lat=30.0444, center_lng=31.2357, zoom=10)


@pytest.fixture()
def units(session: Session) -> UnitRepository:
    return UnitRepository(session)


@pytest.fixture()
def service(session: Session, units: UnitRepository) -> CampaignService:
    return CampaignService(CampaignRepository(session), units)


def _create_unit(units: UnitRepository, unit_id: str, lat_lng: str = "30.0444,31.2357"):
    return units.create(UnitInput(unit_id=unit_id, location=f"{unit_id} site", governorate="Cairo", lat_lng=lat_lng))


def test_create_reports_name_and_selection_errors_together(service: CampaignService) -> None:
    with pytest.raises(CampaignValidationError) as exc_info:
        service.create_campaign({"name": "ab", "unit_ids": []})

    assert [error.field for error in exc_info.value.errors] == ["name", "unit_ids"]
    assert service.list_campaigns() == []


def test_create_trims_name_and_deduplicates_unit_ids(service: CampaignService, units: UnitRepository) -> None:
    unit = _create_unit(units, "UNI001")

    campaign = service.create_campaign({"name": "  Summer 2024 ", "unit_ids": [str(unit.id), str(unit.id)]})

    assert campaign.name == "Summer 2024"
    assert campaign.unit_ids == [str(unit.id)]


def test_deleted_units_resolve_to_nothing(service: CampaignService, units: UnitRepository) -> None:
    kept = _create_unit(units, "UNI001")
    removed = _create_unit(units, "UNI002")
    campaign = service.create_campaign({"name": "Launch", "unit_ids": [str(kept.id), str(removed.id)]})

    units.delete(removed.id)

    assert [unit.unit_id for unit in service.campaign_units(campaign)] == ["UNI001"]


def test_campaign_with_only_dangling_references_has_zero_units(service: CampaignService, units: UnitRepository) -> None:
    unit = _create_unit(units, "UNI001")
    campaign = service.create_campaign({"name": "Ghost", "unit_ids": [str(unit.id)]})
    units.delete(unit.id)

    view = service.build_map_view(campaign.id, PREFERENCES)

    assert service.campaign_units(campaign) == []
    assert view.markers == []
    assert view.bounds is None


def test_map_view_uses_preferences_and_skips_bad_coordinates(service: CampaignService, units: UnitRepository) -> None:
    north = _create_unit(units, "N1", "31.2001,29.9187")
    south = _create_unit(units, "S1", "24.0889,32.8998")
    broken = _create_unit(units, "B1", "30,31")
    units.update(broken.id, {"lat_lng": "not coordinates"})
    campaign = service.create_campaign(
        {"name": "Nationwide", "unit_ids": [str(north.id), str(south.id), str(broken.id)]}
    )
    preferences = MapPreferences(center_lat=26.8, center_lng=30.8, zoom=6, marker_style="default")

    view = service.build_map_view(campaign.id, preferences)

    assert view.campaign_name == "Nationwide"
    assert view.center == (26.8, 30.8)
    assert view.zoom == 6
    assert sorted(marker.unit_id for marker in view.markers) == ["N1", "S1"]
    assert view.bounds.south == pytest.approx(24.0889)
    assert view.bounds.north == pytest.approx(31.2001)
    assert view.bounds.west == pytest.approx(29.9187)
    assert view.bounds.east == pytest.approx(32.8998)


def test_publish_stores_share_url(service: CampaignService, units: UnitRepository) -> None:
    unit = _create_unit(units, "UNI001")
    campaign = service.create_campaign({"name": "Launch", "unit_ids": [str(unit.id)]})

    published = service.publish_campaign(campaign.id, "https://maps.example.com/")

    assert published.export_url == f"https://maps.example.com/campaigns/{campaign.id}/map"
    assert service.get_campaign(campaign.id).export_url == published.export_url


def test_update_and_delete_missing_campaign(service: CampaignService) -> None:
    with pytest.raises(CampaignNotFoundError):
        service.update_campaign(uuid.uuid4(), {"name": "Valid name", "unit_ids": ["x"]})
    with pytest.raises(CampaignNotFoundError):
        service.delete_campaign(uuid.uuid4())


def test_download_payload(service: CampaignService, units: UnitRepository) -> None:
    unit = _create_unit(units, "UNI001")
    campaign = service.create_campaign({"name": "Summer Sale 2024!", "unit_ids": [str(unit.id)]})
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    filename, payload = service.build_download(campaign.id, now=now)

    assert filename == "summer_sale_2024__data.json"
    assert payload["campaign"]["name"] == "Summer Sale 2024!"
    assert [item["unit_id"] for item in payload["units"]] == ["UNI001"]
    assert payload["exported_at"] == "2026-10-19T12:00:00+00:00"


def test_url_and_filename_helpers() -> None:
    pk = uuid.UUID("12345678-1234-5678-1234-567812345678")
    assert campaign_export_url("http://localhost:8000", pk) == f"http://localhost:8000/campaigns/{pk}/map"
    assert campaign_download_filename("Q3 Cairo/Giza") == "q3_cairo_giza_data.json"
