"""
app/services/unit_service.py

Form-path unit operations: validate, guard unit_id uniqueness, persist.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from app.domain.unit import FieldError, UnitInput
from app.services.errors import DuplicateUnitIdError, UnitValidationError
from app.validators.entity_validators import validate_unit
from app.validators.spreadsheet_validator import sanitize_text
from db.models.unit import Unit
from db.repositories.unit_repository import UnitRepository

logger = logging.getLogger(__name__)

DUPLICATE_UNIT_ID_MESSAGE = "Unit ID already exists"


class UnitService:
    """
    Creates and edits units keyed on their opaque id.

    The unit_id uniqueness check here is a courtesy for a readable error;
    the store's unique constraint remains the real guarantee.
    """

    def __init__(self, repository: UnitRepository) -> None:
        self._repository = repository

    def create_unit(self, payload: Mapping[str, Any]) -> Unit:
        unit = self._validated(payload)
        if self._repository.get_by_unit_id(unit.unit_id) is not None:
            raise DuplicateUnitIdError([FieldError(field="unit_id", message=DUPLICATE_UNIT_ID_MESSAGE)])

        created = self._repository.create(unit)
        logger.info("Unit created id=%s unit_id=%r", created.id, created.unit_id)
        return created

    def update_unit(self, unit_pk: uuid.UUID, payload: Mapping[str, Any]) -> Unit:
        """
        Replace every editable field of an existing unit.
        """

        unit = self._validated(payload)
        self._repository.get(unit_pk)

        existing = self._repository.get_by_unit_id(unit.unit_id)
        if existing is not None and existing.id != unit_pk:
            raise DuplicateUnitIdError([FieldError(field="unit_id", message=DUPLICATE_UNIT_ID_MESSAGE)])

        updated = self._repository.update(unit_pk, unit.as_dict())
        logger.info("Unit updated id=%s unit_id=%r", updated.id, updated.unit_id)
        return updated

    def delete_unit(self, unit_pk: uuid.UUID) -> None:
        self._repository.delete(unit_pk)
        logger.info("Unit deleted id=%s", unit_pk)

    @staticmethod
    def _validated(payload: Mapping[str, Any]) -> UnitInput:
        errors = validate_unit(payload)
        if errors:
            raise UnitValidationError(errors)
        return UnitInput(
            unit_id=sanitize_text(payload["unit_id"]),
            location=sanitize_text(payload["location"]),
            governorate=sanitize_text(payload["governorate"]),
            lat_lng=sanitize_text(payload["lat_lng"]),
        )
