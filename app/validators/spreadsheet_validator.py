"""
app/validators/spreadsheet_validator.py

Row-level validation and normalisation for spreadsheet unit imports.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from app.domain.unit import ConversionResult, UnitInput
from app.validators.entity_validators import validate_unit

# Spreadsheet header -> unit field, in column order.
IMPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Unit ID", "unit_id"),
    ("Location", "location"),
    ("Governorate", "governorate"),
    ("Latitude,Longitude", "lat_lng"),
)

REQUIRED_HEADERS: tuple[str, ...] = tuple(header for header, _ in IMPORT_COLUMNS)


def normalize_header(header: Any) -> str:
    """
    Normalize a header cell for case-insensitive, trimmed matching.
    """

    if header is None:
        return ""
    return str(header).strip().lower()


def sanitize_text(value: str) -> str:
    """
    Trim and collapse internal whitespace runs to a single space.
    """

    return " ".join(value.split())


class SpreadsheetRowConverter:
    """
    Converts raw header->cell rows into validated unit records.

    Every row is checked; rows with any violation are rejected whole and
    contribute ``"Row <n>: ..."`` messages instead of a record.
    """

    def convert_rows(self, rows: Iterable[Mapping[str, Any]]) -> ConversionResult:
        units: list[UnitInput] = []
        errors: list[str] = []
        failed_rows = 0

        for index, row in enumerate(rows):
            text_row = self.extract_fields(row)
            row_errors = self.validate_row(text_row, index)
            if row_errors:
                failed_rows += 1
                errors.extend(row_errors)
                continue

            units.append(
                UnitInput(
                    unit_id=sanitize_text(text_row["unit_id"]),
                    location=sanitize_text(text_row["location"]),
                    governorate=sanitize_text(text_row["governorate"]),
                    lat_lng=sanitize_text(text_row["lat_lng"]),
                )
            )

        return ConversionResult(units=units, errors=errors, failed_rows=failed_rows)

    def validate_row(self, text_row: Mapping[str, str], index: int) -> list[str]:
        """
        Validate one row; ``index`` is 0-based, messages are 1-based.
        """

        prefix = f"Row {index + 1}: "
        return [f"{prefix}{error.message}" for error in validate_unit(text_row)]

    def extract_fields(self, row: Mapping[str, Any]) -> dict[str, str]:
        """
        Pick the import columns out of a raw row and coerce cells to text.
        """

        lookup: dict[str, Any] = {}
        for key, value in row.items():
            normalized = normalize_header(key)
            if normalized and normalized not in lookup:
                lookup[normalized] = value

        return {
            field_name: self._cell_to_text(lookup.get(normalize_header(header)))
            for header, field_name in IMPORT_COLUMNS
        }

    @staticmethod
    def is_blank_row(values: Iterable[Any]) -> bool:
        """
        Return True when every cell is empty or absent.

        Whitespace-only cells count as content so they reach validation.
        """

        return all(value is None or value == "" for value in values)

    @staticmethod
    def _cell_to_text(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return str(value).upper()
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)
