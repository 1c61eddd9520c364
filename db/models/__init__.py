"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.campaign import Campaign
from db.models.unit import Unit
from db.models.user_settings import UserSettings

__all__ = [
    "Campaign",
    "Unit",
    "UserSettings",
]
