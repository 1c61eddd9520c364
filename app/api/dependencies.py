"""
app/api/dependencies.py

Shared FastAPI dependencies: uploads, services and gateway error mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_spreadsheet_import_settings
from app.services.backup_service import BackupService
from app.services.campaign_service import CampaignService
from app.services.settings_service import SettingsService
from app.services.unit_service import UnitService
from db.repositories.campaign_repository import CampaignRepository
from db.repositories.errors import (
    ConstraintViolationError,
    RecordNotFoundError,
    RepositoryError,
)
from db.repositories.settings_repository import SettingsRepository
from db.repositories.unit_repository import UnitRepository
from db.session import get_db

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpreadsheetUpload:
    file_name: str | None
    content_type: str | None
    content: bytes


def get_spreadsheet_upload(file: UploadFile = File(...)) -> SpreadsheetUpload:
    """
    Read an uploaded spreadsheet into memory.

    At most one byte past the configured limit is read, which is enough for
    the size gate to reject the file.
    """

    limit = get_spreadsheet_import_settings().max_upload_bytes
    try:
        content = file.file.read(limit + 1)
    finally:
        file.file.close()

    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty.",
        )

    return SpreadsheetUpload(
        file_name=file.filename,
        content_type=file.content_type,
        content=content,
    )


def get_unit_repository(db: Session = Depends(get_db)) -> UnitRepository:
    return UnitRepository(db)


def get_unit_service(units: UnitRepository = Depends(get_unit_repository)) -> UnitService:
    return UnitService(units)


def get_campaign_service(db: Session = Depends(get_db)) -> CampaignService:
    return CampaignService(CampaignRepository(db), UnitRepository(db))


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(SettingsRepository(db))


def get_backup_service(db: Session = Depends(get_db)) -> BackupService:
    return BackupService(
        units=UnitRepository(db),
        campaigns=CampaignRepository(db),
        settings=SettingsRepository(db),
    )


def gateway_http_error(exc: RepositoryError, *, action: str) -> HTTPException:
    """
    Map a gateway exception to the HTTP error a client should see.

    Call from inside the ``except`` block so the traceback is logged.
    """

    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConstraintViolationError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    logger.exception("Gateway failure while trying to %s", action)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
