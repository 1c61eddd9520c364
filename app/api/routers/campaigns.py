"""
app/api/routers/campaigns.py

Campaign CRUD, map view, publishing and JSON data download.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from app.api.dependencies import gateway_http_error, get_campaign_service, get_settings_service
from app.config import get_share_link_settings
from app.domain.map_view import CampaignMapView
from app.schemas.campaigns import (
    CampaignDetailResponse,
    CampaignMapResponse,
    CampaignRequest,
    CampaignResponse,
    MapBoundsResponse,
    MapMarkerResponse,
)
from app.schemas.units import UnitResponse
from app.services.campaign_service import CampaignService
from app.services.errors import CampaignValidationError
from app.services.settings_service import SettingsService
from db.models.campaign import Campaign
from db.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


def _detail_response(campaign: Campaign, service: CampaignService) -> CampaignDetailResponse:
    summary = CampaignResponse.model_validate(campaign)
    return CampaignDetailResponse(
        **summary.model_dump(),
        units=[UnitResponse.model_validate(unit) for unit in service.campaign_units(campaign)],
    )


def _map_response(view: CampaignMapView) -> CampaignMapResponse:
    return CampaignMapResponse(
        campaign_id=view.campaign_id,
        campaign_name=view.campaign_name,
        center_lat=view.center[0],
        center_lng=view.center[1],
        zoom=view.zoom,
        marker_style=view.marker_style,
        unit_count=len(view.markers),
        markers=[
            MapMarkerResponse(
                unit_id=marker.unit_id,
                lat=marker.position[0],
                lng=marker.position[1],
                label=marker.label,
                location=marker.location,
                governorate=marker.governorate,
                selected=marker.selected,
            )
            for marker in view.markers
        ],
        bounds=MapBoundsResponse.model_validate(view.bounds) if view.bounds else None,
        export_url=view.export_url,
    )


@router.get("", response_model=list[CampaignResponse])
def list_campaigns(service: CampaignService = Depends(get_campaign_service)) -> list[CampaignResponse]:
    try:
        campaigns = service.list_campaigns()
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="list campaigns") from exc
    return [CampaignResponse.model_validate(campaign) for campaign in campaigns]


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    body: CampaignRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    try:
        campaign = service.create_campaign(body.model_dump())
    except CampaignValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="create campaign") from exc
    return CampaignResponse.model_validate(campaign)


@router.get("/{campaign_pk}", response_model=CampaignDetailResponse)
def get_campaign(
    campaign_pk: uuid.UUID,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignDetailResponse:
    """
    Return a campaign with its resolvable units. Deleted units are omitted.
    """

    try:
        return _detail_response(service.get_campaign(campaign_pk), service)
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="load campaign") from exc


@router.put("/{campaign_pk}", response_model=CampaignResponse)
def update_campaign(
    campaign_pk: uuid.UUID,
    body: CampaignRequest,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    try:
        campaign = service.update_campaign(campaign_pk, body.model_dump())
    except CampaignValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="update campaign") from exc
    return CampaignResponse.model_validate(campaign)


@router.delete("/{campaign_pk}", status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(
    campaign_pk: uuid.UUID,
    service: CampaignService = Depends(get_campaign_service),
) -> Response:
    try:
        service.delete_campaign(campaign_pk)
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="delete campaign") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{campaign_pk}/map", response_model=CampaignMapResponse)
def campaign_map(
    campaign_pk: uuid.UUID,
    service: CampaignService = Depends(get_campaign_service),
    settings: SettingsService = Depends(get_settings_service),
) -> CampaignMapResponse:
    try:
        view = service.build_map_view(campaign_pk, settings.current())
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="build campaign map") from exc
    return _map_response(view)


@router.post("/{campaign_pk}/publish", response_model=CampaignResponse)
def publish_campaign(
    campaign_pk: uuid.UUID,
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    try:
        campaign = service.publish_campaign(campaign_pk, get_share_link_settings().base_url)
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="publish campaign") from exc
    return CampaignResponse.model_validate(campaign)


@router.get("/{campaign_pk}/download")
def download_campaign(
    campaign_pk: uuid.UUID,
    service: CampaignService = Depends(get_campaign_service),
) -> JSONResponse:
    try:
        filename, payload = service.build_download(campaign_pk)
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="download campaign") from exc
    return JSONResponse(
        content=payload,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
