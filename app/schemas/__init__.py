"""
app/schemas package marker.
"""

from app.schemas.campaigns import (
    CampaignDetailResponse,
    CampaignMapResponse,
    CampaignRequest,
    CampaignResponse,
)
from app.schemas.settings import MapSettingsRequest, MapSettingsResponse
from app.schemas.spreadsheet_import import ImportPreviewResponse, ImportResultResponse
from app.schemas.units import FieldErrorResponse, UnitRequest, UnitResponse

__all__ = [
    "CampaignDetailResponse",
    "CampaignMapResponse",
    "CampaignRequest",
    "CampaignResponse",
    "MapSettingsRequest",
    "MapSettingsResponse",
    "ImportPreviewResponse",
    "ImportResultResponse",
    "FieldErrorResponse",
    "UnitRequest",
    "UnitResponse",
]
