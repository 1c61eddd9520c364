"""
app/api/routers/backup.py

Full-data JSON backup and the destructive "clear all data" endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from app.api.dependencies import gateway_http_error, get_backup_service
from app.services.backup_service import BackupService
from db.repositories.errors import RepositoryError

router = APIRouter(tags=["backup"])


@router.get("/backup")
def download_backup(service: BackupService = Depends(get_backup_service)) -> JSONResponse:
    try:
        filename, payload = service.export()
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="export backup") from exc
    return JSONResponse(
        content=payload,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/data", status_code=status.HTTP_204_NO_CONTENT)
def clear_all_data(service: BackupService = Depends(get_backup_service)) -> Response:
    """
    Delete every campaign and unit. Map settings are kept.
    """

    try:
        service.clear_all_data()
    except RepositoryError as exc:
        raise gateway_http_error(exc, action="clear all data") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
