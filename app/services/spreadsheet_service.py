"""
app/services/spreadsheet_service.py

Spreadsheet import/export adapter for units.

Reading produces raw header->cell rows from the first sheet of an .xlsx
workbook or a CSV file; validation of those rows is left to
SpreadsheetRowConverter. Writing produces .xlsx (or CSV) bytes for the
unit export and the fixed sample template.
"""

from __future__ import annotations

import csv
import io
import zipfile
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from app.config import DEFAULT_MAX_UPLOAD_BYTES
from app.validators.spreadsheet_validator import (
    REQUIRED_HEADERS,
    SpreadsheetRowConverter,
    normalize_header,
)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_CONTENT_TYPE = "application/vnd.ms-excel"
CSV_CONTENT_TYPE = "text/csv"

ACCEPTED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        XLSX_CONTENT_TYPE,
        XLS_CONTENT_TYPE,
        CSV_CONTENT_TYPE,
        "application/csv",
    }
)

EXPORT_HEADERS: tuple[str, ...] = (*REQUIRED_HEADERS, "Created At", "Updated At")
EXPORT_COLUMN_WIDTHS: tuple[int, ...] = (15, 30, 20, 25, 15, 15)

SAMPLE_FILENAME = "sample-units.xlsx"
SAMPLE_SHEET_TITLE = "Sample Units"
SAMPLE_UNITS: tuple[tuple[str, str, str, str], ...] = (
    ("UNI001", "Downtown Cairo", "Cairo", "30.0444,31.2357"),
    ("UNI002", "Alexandria Corniche", "Alexandria", "31.2001,29.9187"),
    ("UNI003", "Giza Pyramids Road", "Giza", "29.9792,31.1342"),
    ("UNI004", "Luxor Temple Area", "Luxor", "25.6872,32.6396"),
    ("UNI005", "Aswan High Dam", "Aswan", "24.0889,32.8998"),
    ("UNI006", "Hurghada Marina", "Red Sea", "27.2579,33.8116"),
    ("UNI007", "Sharm El Sheikh", "South Sinai", "27.9158,34.3300"),
    ("UNI008", "Mansoura University", "Dakahlia", "31.0364,31.3801"),
    ("UNI009", "Tanta City Center", "Gharbia", "30.7865,31.0004"),
    ("UNI010", "Port Said Harbor", "Port Said", "31.2653,32.3019"),
)

_ZIP_SIGNATURE = b"PK\x03\x04"
_OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SpreadsheetFormatError(ValueError):
    """
    Raised when a file cannot be used as a unit spreadsheet at all.
    """


class SpreadsheetUploadRejected(SpreadsheetFormatError):
    """
    Raised by the pre-parse content type / size gate.
    """


class SpreadsheetNoDataError(SpreadsheetFormatError):
    """
    Raised when the sheet has no data rows below the header.
    """


class SpreadsheetMissingColumnsError(SpreadsheetFormatError):
    """
    Raised when required headers are absent from the header row.
    """

    def __init__(self, missing_columns: Sequence[str]) -> None:
        self.missing_columns = tuple(missing_columns)
        super().__init__(f"Missing required columns: {', '.join(self.missing_columns)}")


# ---------------------------------------------------------------------------
# Upload gate
# ---------------------------------------------------------------------------


def check_upload(
    *,
    content_type: str | None,
    size_bytes: int,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> None:
    """
    Reject files whose declared type or size is unacceptable.

    Advisory only: the declared type comes from the client.
    """

    normalized = (content_type or "").split(";", 1)[0].strip().lower()
    if normalized not in ACCEPTED_CONTENT_TYPES:
        raise SpreadsheetUploadRejected("Please select a valid Excel file (.xlsx, .xls) or CSV file")

    if size_bytes > max_bytes:
        limit_mib = max_bytes / (1024 * 1024)
        raise SpreadsheetUploadRejected(f"File size must be less than {limit_mib:g}MB")


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def parse_spreadsheet(content: bytes) -> list[dict[str, Any]]:
    """
    Decode the first sheet of a workbook (or a CSV file) into raw rows.

    Keys are the header cells exactly as they appear in the file.
    """

    return rows_from_sheet(read_first_sheet(content))


def read_first_sheet(content: bytes) -> list[list[Any]]:
    if content.startswith(_ZIP_SIGNATURE):
        return _read_xlsx(content)
    if content.startswith(_OLE2_SIGNATURE):
        raise SpreadsheetFormatError(
            "Legacy .xls workbooks are not supported. Save the file as .xlsx or CSV and try again."
        )
    return _read_csv(content)


def rows_from_sheet(sheet_rows: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    """
    Turn sheet rows into header->cell mappings.

    Rows whose cells are all empty are dropped here; anything else,
    however incomplete, is passed on for validation.
    """

    if len(sheet_rows) < 2:
        raise SpreadsheetNoDataError("Spreadsheet must contain at least a header row and one data row")

    headers = list(sheet_rows[0])
    present = {normalize_header(header) for header in headers}
    missing = [header for header in REQUIRED_HEADERS if normalize_header(header) not in present]
    if missing:
        raise SpreadsheetMissingColumnsError(missing)

    rows: list[dict[str, Any]] = []
    for raw_row in sheet_rows[1:]:
        if SpreadsheetRowConverter.is_blank_row(raw_row):
            continue

        row: dict[str, Any] = {}
        for index, header in enumerate(headers):
            if header is None or header == "":
                continue
            row[str(header)] = raw_row[index] if index < len(raw_row) else None
        rows.append(row)

    if not rows:
        raise SpreadsheetNoDataError("Spreadsheet must contain at least a header row and one data row")

    return rows


def _read_xlsx(content: bytes) -> list[list[Any]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as exc:
        raise SpreadsheetFormatError("Failed to read the spreadsheet file.") from exc

    try:
        if not workbook.worksheets:
            raise SpreadsheetNoDataError("Spreadsheet must contain at least a header row and one data row")
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_csv(content: bytes) -> list[list[Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SpreadsheetFormatError("CSV must be UTF-8 encoded.") from exc

    try:
        return [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    except csv.Error as exc:
        raise SpreadsheetFormatError(f"Invalid CSV format: {exc}") from exc


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def format_export_date(value: datetime | date | None) -> str:
    """
    Render a timestamp as a month/day/year date string.
    """

    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def unit_export_rows(units: Iterable[Any]) -> list[list[str]]:
    return [
        [
            unit.unit_id,
            unit.location,
            unit.governorate,
            unit.lat_lng,
            format_export_date(getattr(unit, "created_at", None)),
            format_export_date(getattr(unit, "updated_at", None)),
        ]
        for unit in units
    ]


def export_units_to_workbook(units: Iterable[Any], *, sheet_title: str = "Units") -> bytes:
    """
    Serialize units into an .xlsx workbook with the six export columns.
    """

    return _build_workbook(
        headers=EXPORT_HEADERS,
        rows=unit_export_rows(units),
        column_widths=EXPORT_COLUMN_WIDTHS,
        sheet_title=sheet_title,
    )


def export_units_to_csv(units: Iterable[Any]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(unit_export_rows(units))
    return buffer.getvalue()


def build_sample_workbook() -> bytes:
    """
    Build the downloadable import template with ten reference rows.
    """

    return _build_workbook(
        headers=REQUIRED_HEADERS,
        rows=[list(row) for row in SAMPLE_UNITS],
        column_widths=EXPORT_COLUMN_WIDTHS[: len(REQUIRED_HEADERS)],
        sheet_title=SAMPLE_SHEET_TITLE,
    )


def export_filename(prefix: str, day: date, extension: str) -> str:
    return f"{prefix}-{day.isoformat()}.{extension}"


def _build_workbook(
    *,
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    column_widths: Sequence[int],
    sheet_title: str,
) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    sheet.append(list(headers))
    for row in rows:
        sheet.append(list(row))
        # Text starting with "=" would otherwise be written as a formula.
        for cell in sheet[sheet.max_row]:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"

    for index, width in enumerate(column_widths, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
