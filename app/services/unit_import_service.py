"""
app/services/unit_import_service.py

Spreadsheet import workflow for units.

    Idle -> FileSelected -> Previewed -> Importing -> Succeeded | Failed

A file that fails the upload gate leaves the workflow Idle; a file that
cannot be parsed moves it to Failed. A preview with validation errors
blocks the import until a new file is selected. The import itself is one
bulk upsert keyed on unit_id: it either succeeds with a count or fails
with the gateway's message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.config import SpreadsheetImportSettings, get_spreadsheet_import_settings
from app.domain.unit import ConversionResult, ImportResult, UnitInput
from app.logging_utils import log_event
from app.services.spreadsheet_service import (
    SpreadsheetFormatError,
    SpreadsheetUploadRejected,
    check_upload,
    parse_spreadsheet,
)
from app.validators.spreadsheet_validator import SpreadsheetRowConverter
from db.repositories.errors import RepositoryError

logger = logging.getLogger(__name__)

UpsertUnits = Callable[[Sequence[UnitInput]], Sequence[Any]]


class ImportStage(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    PREVIEWED = "previewed"
    IMPORTING = "importing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImportWorkflowError(RuntimeError):
    """
    Raised when a step is requested from a stage that does not allow it.
    """


@dataclass(frozen=True)
class ImportPreview:
    """
    What the user sees after a file has been parsed and converted.
    """

    stage: ImportStage
    file_name: str | None
    row_count: int
    valid_count: int
    error_count: int
    preview_units: list[UnitInput] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


class UnitImportWorkflow:
    """
    Drives one user's import of one file at a time.
    """

    def __init__(
        self,
        *,
        settings: SpreadsheetImportSettings | None = None,
        converter: SpreadsheetRowConverter | None = None,
    ) -> None:
        self._settings = settings or get_spreadsheet_import_settings()
        self._converter = converter or SpreadsheetRowConverter()
        self._stage = ImportStage.IDLE
        self._file_name: str | None = None
        self._content: bytes | None = None
        self._conversion: ConversionResult | None = None
        self._last_result: ImportResult | None = None

    @property
    def stage(self) -> ImportStage:
        return self._stage

    @property
    def last_result(self) -> ImportResult | None:
        return self._last_result

    @property
    def conversion(self) -> ConversionResult | None:
        return self._conversion

    def select_file(
        self,
        *,
        file_name: str | None,
        content_type: str | None,
        content: bytes,
    ) -> ImportResult | None:
        """
        Accept a new file, replacing any previous one.

        Returns a failed ImportResult when the upload gate rejects the file.
        """

        if self._stage is ImportStage.IMPORTING:
            raise ImportWorkflowError("Cannot select a new file while an import is in progress.")

        self._reset()
        try:
            check_upload(
                content_type=content_type,
                size_bytes=len(content),
                max_bytes=self._settings.max_upload_bytes,
            )
        except SpreadsheetUploadRejected as exc:
            self._last_result = ImportResult(success=False, message=str(exc))
            log_event(
                logger,
                logging.INFO,
                "unit_import.file_rejected",
                file_name=file_name,
                content_type=content_type,
                size_bytes=len(content),
                reason=str(exc),
            )
            return self._last_result

        self._file_name = file_name
        self._content = content
        self._transition(ImportStage.FILE_SELECTED)
        return None

    def preview(self) -> ImportPreview:
        """
        Parse and convert the selected file.

        Raises SpreadsheetFormatError when the file cannot be decoded or
        lacks required columns; the workflow is then Failed.
        """

        if self._stage not in (ImportStage.FILE_SELECTED, ImportStage.PREVIEWED) or self._content is None:
            raise ImportWorkflowError("Select a file before previewing it.")

        try:
            rows = parse_spreadsheet(self._content)
        except SpreadsheetFormatError as exc:
            self._last_result = ImportResult(success=False, message=str(exc))
            self._transition(ImportStage.FAILED, reason=str(exc))
            raise

        conversion = self._converter.convert_rows(rows)
        self._conversion = conversion
        self._record_validation_errors(conversion)

        reported = conversion.errors[: self._settings.max_reported_errors]
        if conversion.has_errors:
            self._last_result = ImportResult(
                success=False,
                message=f"Found {len(conversion.errors)} validation errors",
                errors=reported,
            )
        else:
            self._last_result = None

        self._transition(
            ImportStage.PREVIEWED,
            rows=len(rows),
            valid=len(conversion.units),
            failed_rows=conversion.failed_rows,
        )
        return ImportPreview(
            stage=self._stage,
            file_name=self._file_name,
            row_count=len(rows),
            valid_count=len(conversion.units),
            error_count=len(conversion.errors),
            preview_units=conversion.units[: self._settings.preview_rows],
            errors=reported,
        )

    def run_import(self, upsert: UpsertUnits) -> ImportResult:
        """
        Hand the converted units to the gateway as one bulk upsert.
        """

        if self._stage is not ImportStage.PREVIEWED or self._conversion is None:
            raise ImportWorkflowError("Preview the file before importing it.")

        conversion = self._conversion
        if conversion.has_errors:
            self._last_result = ImportResult(
                success=False,
                message=f"Cannot import due to {len(conversion.errors)} validation errors",
                errors=conversion.errors[: self._settings.max_reported_errors],
            )
            return self._last_result

        self._transition(ImportStage.IMPORTING, units=len(conversion.units))
        try:
            stored = upsert(conversion.units)
        except RepositoryError as exc:
            self._last_result = ImportResult(success=False, message=str(exc) or "Import failed")
            self._transition(ImportStage.FAILED, reason=str(exc))
            return self._last_result

        self._last_result = ImportResult(
            success=True,
            message="Units imported successfully",
            imported_count=len(stored),
        )
        self._transition(ImportStage.SUCCEEDED, imported=len(stored))
        return self._last_result

    def _reset(self) -> None:
        self._stage = ImportStage.IDLE
        self._file_name = None
        self._content = None
        self._conversion = None
        self._last_result = None

    def _transition(self, stage: ImportStage, **fields: Any) -> None:
        previous = self._stage
        self._stage = stage
        log_event(
            logger,
            logging.INFO,
            "unit_import.transition",
            from_stage=previous.value,
            to_stage=stage.value,
            file_name=self._file_name,
            **fields,
        )

    def _record_validation_errors(self, conversion: ConversionResult) -> None:
        if not self._settings.log_validation_errors:
            return
        for message in conversion.errors:
            logger.warning("Spreadsheet validation error file=%r %s", self._file_name, message)
