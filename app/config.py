"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.domain.map_view import DEFAULT_STYLE, MapPreferences
from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class SpreadsheetImportSettings:
    """
    Runtime settings for spreadsheet unit imports.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    preview_rows: int = 5
    max_reported_errors: int = 10
    log_validation_errors: bool = True


@dataclass(frozen=True)
class MapDefaultSettings:
    """
    Map preferences used until a settings record has been saved.
    """

    center_lat: float = 30.0444
    center_lng: float = 31.2357
    zoom: int = 10
    map_style: str = DEFAULT_STYLE
    marker_style: str = DEFAULT_STYLE

    def to_preferences(self) -> MapPreferences:
        return MapPreferences(
            center_lat=self.center_lat,
            center_lng=self.center_lng,
            zoom=self.zoom,
            map_style=self.map_style,
            marker_style=self.marker_style,
            saved=False,
        )


@dataclass(frozen=True)
class ShareLinkSettings:
    """
    Public origin used when publishing shareable campaign maps.
    """

    base_url: str = "http://localhost:8000"


@lru_cache(maxsize=1)
def get_spreadsheet_import_settings() -> SpreadsheetImportSettings:
    """
    Return spreadsheet import settings from environment variables.
    """

    return SpreadsheetImportSettings(
        max_upload_bytes=max(1, _get_int_env("IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        preview_rows=max(0, _get_int_env("IMPORT_PREVIEW_ROWS", 5)),
        max_reported_errors=max(1, _get_int_env("IMPORT_MAX_REPORTED_ERRORS", 10)),
        log_validation_errors=_get_bool_env("IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_map_default_settings() -> MapDefaultSettings:
    """
    Return fallback map preferences. Out-of-range values fall back to defaults.
    """

    defaults = MapDefaultSettings()
    center_lat = _get_float_env("MAP_DEFAULT_CENTER_LAT", defaults.center_lat)
    center_lng = _get_float_env("MAP_DEFAULT_CENTER_LNG", defaults.center_lng)
    zoom = _get_int_env("MAP_DEFAULT_ZOOM", defaults.zoom)

    return MapDefaultSettings(
        center_lat=center_lat if -90.0 <= center_lat <= 90.0 else defaults.center_lat,
        center_lng=center_lng if -180.0 <= center_lng <= 180.0 else defaults.center_lng,
        zoom=zoom if 1 <= zoom <= 20 else defaults.zoom,
        map_style=_get_str_env("MAP_DEFAULT_STYLE", defaults.map_style),
        marker_style=_get_str_env("MAP_DEFAULT_MARKER_STYLE", defaults.marker_style),
    )


@lru_cache(maxsize=1)
def get_share_link_settings() -> ShareLinkSettings:
    return ShareLinkSettings(
        base_url=_get_str_env("PUBLIC_BASE_URL", ShareLinkSettings.base_url).rstrip("/"),
    )
