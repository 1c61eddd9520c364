"""
app/validators package marker.
"""

from app.validators.entity_validators import (
    validate_campaign,
    validate_campaign_name,
    validate_map_settings,
    validate_unit,
    validate_unit_selection,
)
from app.validators.spreadsheet_validator import (
    IMPORT_COLUMNS,
    REQUIRED_HEADERS,
    SpreadsheetRowConverter,
    sanitize_text,
)

__all__ = [
    "IMPORT_COLUMNS",
    "REQUIRED_HEADERS",
    "SpreadsheetRowConverter",
    "sanitize_text",
    "validate_campaign",
    "validate_campaign_name",
    "validate_map_settings",
    "validate_unit",
    "validate_unit_selection",
]
