"""
app/services package marker.
"""

from app.services.backup_service import BackupService, build_backup
from app.services.campaign_service import (
    CampaignService,
    build_campaign_map_view,
    resolve_campaign_units,
)
from app.services.errors import (
    CampaignValidationError,
    DuplicateUnitIdError,
    EntityValidationError,
    SettingsValidationError,
    UnitValidationError,
)
from app.services.settings_service import SettingsService
from app.services.spreadsheet_service import (
    SpreadsheetFormatError,
    SpreadsheetMissingColumnsError,
    SpreadsheetNoDataError,
    SpreadsheetUploadRejected,
    build_sample_workbook,
    export_units_to_workbook,
    parse_spreadsheet,
)
from app.services.unit_import_service import ImportPreview, ImportStage, UnitImportWorkflow
from app.services.unit_service import UnitService

__all__ = [
    "BackupService",
    "build_backup",
    "CampaignService",
    "build_campaign_map_view",
    "resolve_campaign_units",
    "CampaignValidationError",
    "DuplicateUnitIdError",
    "EntityValidationError",
    "SettingsValidationError",
    "UnitValidationError",
    "SettingsService",
    "SpreadsheetFormatError",
    "SpreadsheetMissingColumnsError",
    "SpreadsheetNoDataError",
    "SpreadsheetUploadRejected",
    "build_sample_workbook",
    "export_units_to_workbook",
    "parse_spreadsheet",
    "ImportPreview",
    "ImportStage",
    "UnitImportWorkflow",
    "UnitService",
]
