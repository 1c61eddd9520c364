"""
app/schemas/spreadsheet_import.py

Response schemas for spreadsheet unit import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PreviewUnitResponse(BaseModel):
    unit_id: str
    location: str
    governorate: str
    lat_lng: str


class ImportPreviewResponse(BaseModel):
    stage: str
    file_name: str | None = None
    row_count: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    error_count: int = Field(..., ge=0)
    preview_units: list[PreviewUnitResponse] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ImportResultResponse(BaseModel):
    success: bool
    message: str
    imported_count: int | None = None
    errors: list[str] | None = None
