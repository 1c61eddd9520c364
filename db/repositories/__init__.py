"""
Repository layer exports.
"""

from db.repositories.campaign_repository import CampaignRepository
from db.repositories.errors import (
    CampaignNotFoundError,
    ConstraintViolationError,
    PersistenceError,
    RecordNotFoundError,
    RepositoryError,
    UnitNotFoundError,
)
from db.repositories.settings_repository import SettingsRepository
from db.repositories.unit_repository import UnitRepository

__all__ = [
    "CampaignRepository",
    "SettingsRepository",
    "UnitRepository",
    "RepositoryError",
    "RecordNotFoundError",
    "UnitNotFoundError",
    "CampaignNotFoundError",
    "ConstraintViolationError",
    "PersistenceError",
]
