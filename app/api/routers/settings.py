"""
app/api/routers/settings.py

Map preference endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import gateway_http_error, get_settings_service
from app.domain.map_view import MapPreferences
from app.schemas.settings import MapSettingsRequest, MapSettingsResponse
from app.services.errors import SettingsValidationError
from app.services.settings_service import SettingsService
from db.repositories.errors import RepositoryError

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_response(preferences: MapPreferences) -> MapSettingsResponse:
    return MapSettingsResponse(
        default_zoom=preferences.zoom,
        default_center_lat=preferences.center_lat,
        default_center_lng=preferences.center_lng,
        preferred_governorate=preferences.preferred_governorate,
        map_style=preferences.map_style,
        marker_style=preferences.marker_style,
        saved=preferences.saved,
    )


@router.get("", response_model=MapSettingsResponse)
def get_settings(service: SettingsService = Depends(get_settings_service)) -> MapSettingsResponse:
    """
    Return the effective preferences; ``saved`` is false until the first save.
    """

    try:
        return _settings_response(service.current())
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="load settings") from exc


@router.put("", response_model=MapSettingsResponse)
def save_settings(
    body: MapSettingsRequest,
    service: SettingsService = Depends(get_settings_service),
) -> MapSettingsResponse:
    try:
        preferences = service.save(body.model_dump(exclude_unset=True))
    except SettingsValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="save settings") from exc
    return _settings_response(preferences)
