"""
app/services/errors.py

Exceptions raised by services when user input fails validation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.domain.unit import FieldError


class EntityValidationError(ValueError):
    """
    Carries field-scoped errors so callers can render them inline.
    """

    summary = "Validation failed."

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = tuple(errors)
        super().__init__("; ".join(error.message for error in self.errors) or self.summary)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.summary,
            "errors": [error.to_dict() for error in self.errors],
        }


class UnitValidationError(EntityValidationError):
    summary = "Unit validation failed."


class CampaignValidationError(EntityValidationError):
    summary = "Campaign validation failed."


class SettingsValidationError(EntityValidationError):
    summary = "Settings validation failed."


class DuplicateUnitIdError(UnitValidationError):
    summary = "Unit ID already exists."
