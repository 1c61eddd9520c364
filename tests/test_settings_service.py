from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from app.domain.map_view import MapPreferences
from app.services.errors import SettingsValidationError
from app.services.settings_service import SettingsService
from db.repositories.settings_repository import SettingsRepository

DEFAULTS = MapPreferences(center_lat=30.0444, center_lng=31.2357, zoom=10)


@pytest.fixture()
def repo(session: Session) -> SettingsRepository:
    return SettingsRepository(session)


@pytest.fixture()
def service(repo: SettingsRepository) -> SettingsService:
    return SettingsService(repo, defaults=DEFAULTS)


def test_defaults_until_first_save(service: SettingsService) -> None:
    current = service.current()

    assert current == DEFAULTS
    assert current.saved is False


def test_save_merges_over_current_and_marks_saved(service: SettingsService, repo: SettingsRepository) -> None:
    saved = service.save({"default_zoom": 12, "preferred_governorate": "  Giza "})

    assert saved.saved is True
    assert saved.zoom == 12
    assert saved.center == (30.0444, 31.2357)
    assert saved.preferred_governorate == "Giza"
    assert service.current() == saved

    service.save({"default_center_lat": 25.6872, "default_center_lng": 32.6396})
    again = service.current()
    assert again.zoom == 12
    assert again.center == (25.6872, 32.6396)
    assert repo.get() is not None


def test_only_one_record_is_ever_stored(service: SettingsService, session: Session) -> None:
    from sqlalchemy import func, select

    from db.models.user_settings import UserSettings

    service.save({"default_zoom": 5})
    service.save({"default_zoom": 6})

    assert session.scalar(select(func.count()).select_from(UserSettings)) == 1


def test_invalid_values_are_not_written(service: SettingsService, repo: SettingsRepository) -> None:
    with pytest.raises(SettingsValidationError) as exc_info:
        service.save({"default_zoom": 25, "default_center_lat": 100.0, "map_style": "satellite"})

    assert [error.field for error in exc_info.value.errors] == ["default_zoom", "coordinates", "map_style"]
    assert repo.get() is None


def test_unknown_fields_are_rejected(service: SettingsService) -> None:
    with pytest.raises(ValueError):
        service.save({"theme": "dark"})
