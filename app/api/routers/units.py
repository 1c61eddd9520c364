"""
app/api/routers/units.py

Unit CRUD, spreadsheet import/export and the sample template download.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.dependencies import (
    SpreadsheetUpload,
    gateway_http_error,
    get_spreadsheet_upload,
    get_unit_repository,
    get_unit_service,
)
from app.schemas.spreadsheet_import import (
    ImportPreviewResponse,
    ImportResultResponse,
    PreviewUnitResponse,
)
from app.schemas.units import UnitRequest, UnitResponse
from app.services.errors import DuplicateUnitIdError, UnitValidationError
from app.services.spreadsheet_service import (
    CSV_CONTENT_TYPE,
    SAMPLE_FILENAME,
    XLSX_CONTENT_TYPE,
    SpreadsheetFormatError,
    build_sample_workbook,
    export_filename,
    export_units_to_csv,
    export_units_to_workbook,
)
from app.services.unit_import_service import ImportPreview, ImportStage, UnitImportWorkflow
from app.services.unit_service import UnitService
from db.base import utcnow
from db.repositories.errors import RepositoryError
from db.repositories.unit_repository import UnitRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/units", tags=["units"])

_VALID_EXPORT_FORMATS = frozenset({"xlsx", "csv"})
_VALID_DIRECTIONS = frozenset({"asc", "desc"})


def _attachment(content: bytes | str, *, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _preview_response(preview: ImportPreview) -> ImportPreviewResponse:
    return ImportPreviewResponse(
        stage=preview.stage.value,
        file_name=preview.file_name,
        row_count=preview.row_count,
        valid_count=preview.valid_count,
        error_count=preview.error_count,
        preview_units=[PreviewUnitResponse(**unit.as_dict()) for unit in preview.preview_units],
        errors=preview.errors,
    )


def _previewed_workflow(upload: SpreadsheetUpload) -> tuple[UnitImportWorkflow, ImportPreview]:
    """
    Select and preview an upload; any file-level failure becomes HTTP 400.
    """

    workflow = UnitImportWorkflow()
    rejected = workflow.select_file(
        file_name=upload.file_name,
        content_type=upload.content_type,
        content=upload.content,
    )
    if rejected is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=rejected.message)

    try:
        preview = workflow.preview()
    except SpreadsheetFormatError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return workflow, preview


# ---------------------------------------------------------------------------
# Collection endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=list[UnitResponse])
def list_units(
    search: str | None = Query(default=None, description="Case-insensitive match on unit ID or location."),
    governorate: str | None = Query(default=None, description="Exact governorate filter."),
    sort_by: str = Query(default="created_at"),
    direction: str = Query(default="desc", description='"asc" or "desc".'),
    units: UnitRepository = Depends(get_unit_repository),
) -> list[UnitResponse]:
    if direction not in _VALID_DIRECTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid direction {direction!r}. Must be one of: {sorted(_VALID_DIRECTIONS)}.",
        )
    try:
        records = units.list_units(
            search=search,
            governorate=governorate,
            sort_by=sort_by,
            descending=direction == "desc",
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="list units") from exc
    return [UnitResponse.model_validate(record) for record in records]


@router.get("/governorates", response_model=list[str])
def list_governorates(units: UnitRepository = Depends(get_unit_repository)) -> list[str]:
    try:
        return units.list_governorates()
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="list governorates") from exc


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(
    body: UnitRequest,
    service: UnitService = Depends(get_unit_service),
) -> UnitResponse:
    """
    Create a unit from the form path.

    422 lists every invalid field; 409 when the unit ID is taken.
    """

    try:
        unit = service.create_unit(body.model_dump())
    except DuplicateUnitIdError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.to_dict()) from exc
    except UnitValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="create unit") from exc
    return UnitResponse.model_validate(unit)


# ---------------------------------------------------------------------------
# Spreadsheet interchange
# ---------------------------------------------------------------------------


@router.post("/import/preview", response_model=ImportPreviewResponse)
def preview_import(upload: SpreadsheetUpload = Depends(get_spreadsheet_upload)) -> ImportPreviewResponse:
    _, preview = _previewed_workflow(upload)
    return _preview_response(preview)


@router.post("/import", response_model=ImportResultResponse)
def import_units(
    upload: SpreadsheetUpload = Depends(get_spreadsheet_upload),
    units: UnitRepository = Depends(get_unit_repository),
) -> ImportResultResponse:
    """
    Parse, validate and bulk-upsert a spreadsheet keyed on unit ID.

    Nothing is stored when any row is invalid.
    """

    workflow, _ = _previewed_workflow(upload)
    result = workflow.run_import(units.bulk_upsert)

    if not result.success:
        if workflow.stage is ImportStage.FAILED:
            logger.error("Unit import failed file=%r: %s", upload.file_name, result.message)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.to_dict())
        raise HTTPException(status_code=422, detail=result.to_dict())

    return ImportResultResponse(**result.to_dict())


@router.get("/export")
def export_units(
    output_format: str = Query(default="xlsx", description='"xlsx" or "csv".'),
    units: UnitRepository = Depends(get_unit_repository),
) -> Response:
    if output_format not in _VALID_EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_EXPORT_FORMATS)}.",
        )
    try:
        records = units.list_units()
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="export units") from exc

    filename = export_filename("units", utcnow().date(), output_format)
    logger.info("Unit export format=%r rows=%d", output_format, len(records))
    if output_format == "csv":
        return _attachment(
            export_units_to_csv(records),
            media_type=f"{CSV_CONTENT_TYPE}; charset=utf-8",
            filename=filename,
        )
    return _attachment(export_units_to_workbook(records), media_type=XLSX_CONTENT_TYPE, filename=filename)


@router.get("/sample")
def download_sample() -> Response:
    return _attachment(build_sample_workbook(), media_type=XLSX_CONTENT_TYPE, filename=SAMPLE_FILENAME)


# ---------------------------------------------------------------------------
# Single-unit endpoints
# ---------------------------------------------------------------------------


@router.get("/{unit_pk}", response_model=UnitResponse)
def get_unit(unit_pk: uuid.UUID, units: UnitRepository = Depends(get_unit_repository)) -> UnitResponse:
    try:
        return UnitResponse.model_validate(units.get(unit_pk))
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="load unit") from exc


@router.put("/{unit_pk}", response_model=UnitResponse)
def update_unit(
    unit_pk: uuid.UUID,
    body: UnitRequest,
    service: UnitService = Depends(get_unit_service),
) -> UnitResponse:
    try:
        unit = service.update_unit(unit_pk, body.model_dump())
    except DuplicateUnitIdError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.to_dict()) from exc
    except UnitValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="update unit") from exc
    return UnitResponse.model_validate(unit)


@router.delete("/{unit_pk}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unit(unit_pk: uuid.UUID, service: UnitService = Depends(get_unit_service)) -> Response:
    try:
        service.delete_unit(unit_pk)
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="delete unit") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
