"""
tests/test_spreadsheet_converter.py

Row conversion: whole-row rejection, 1-based row messages, sanitisation.
"""

from __future__ import annotations

import pytest

from app.domain.unit import UnitInput
from app.validators.spreadsheet_validator import SpreadsheetRowConverter


@pytest.fixture()
def converter() -> SpreadsheetRowConverter:
    return SpreadsheetRowConverter()


def _row(unit_id="UNI001", location="Downtown Cairo", governorate="Cairo", lat_lng="30.0444,31.2357"):
    return {
        "Unit ID": unit_id,
        "Location": location,
        "Governorate": governorate,
        "Latitude,Longitude": lat_lng,
    }


def test_mixed_rows_yield_one_unit_and_two_prefixed_errors(converter: SpreadsheetRowConverter) -> None:
    rows = [
        _row(),
        _row(unit_id="UNI002", governorate=""),
        _row(unit_id="UNI003", lat_lng="95,31.2"),
    ]

    result = converter.convert_rows(rows)

    assert result.units == [UnitInput("UNI001", "Downtown Cairo", "Cairo", "30.0444,31.2357")]
    assert len(result.errors) == 2
    assert result.errors[0].startswith("Row 2: ")
    assert result.errors[1].startswith("Row 3: ")
    assert result.failed_rows == 2
    assert result.has_errors


def test_every_violation_in_a_row_is_reported(converter: SpreadsheetRowConverter) -> None:
    result = converter.convert_rows([_row(unit_id="", location=None, governorate="  ", lat_lng="x")])

    assert result.units == []
    assert result.errors == [
        "Row 1: Unit ID is required",
        "Row 1: Location is required",
        "Row 1: Governorate is required",
        "Row 1: Valid coordinates are required (format: latitude,longitude)",
    ]
    assert result.failed_rows == 1


def test_text_fields_are_trimmed_and_whitespace_collapsed(converter: SpreadsheetRowConverter) -> None:
    result = converter.convert_rows([_row(unit_id="  UNI 9 ", location="Nile\t  Corniche\n Road", lat_lng=" 30.1 ,31.2 ")])

    assert result.errors == []
    unit = result.units[0]
    assert unit.unit_id == "UNI 9"
    assert unit.location == "Nile Corniche Road"
    assert unit.lat_lng == "30.1 ,31.2"


def test_headers_match_case_insensitively(converter: SpreadsheetRowConverter) -> None:
    row = {
        " unit id ": "UNI010",
        "LOCATION": "Port Said Harbor",
        "governorate": "Port Said",
        "latitude,longitude": "31.2653,32.3019",
    }

    result = converter.convert_rows([row])

    assert result.units == [UnitInput("UNI010", "Port Said Harbor", "Port Said", "31.2653,32.3019")]


def test_numeric_cells_are_coerced_to_text(converter: SpreadsheetRowConverter) -> None:
    result = converter.convert_rows([_row(unit_id=1001.0), _row(unit_id=7)])

    assert [unit.unit_id for unit in result.units] == ["1001", "7"]


def test_processing_continues_past_bad_rows(converter: SpreadsheetRowConverter) -> None:
    rows = [_row(unit_id="") for _ in range(3)] + [_row(unit_id="OK1")]

    result = converter.convert_rows(rows)

    assert [unit.unit_id for unit in result.units] == ["OK1"]
    assert [message[:6] for message in result.errors] == ["Row 1:", "Row 2:", "Row 3:"]
