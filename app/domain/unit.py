"""
app/domain/unit.py

Domain models shared by unit validation and spreadsheet import flows.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class UnitInput:
    """
    Unit-shaped record prepared for persistence (no id, no timestamps).
    """

    unit_id: str
    location: str
    governorate: str
    lat_lng: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class FieldError:
    """
    One field-scoped validation failure.
    """

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ConversionResult:
    """
    Output of converting raw spreadsheet rows into unit records.
    """

    units: list[UnitInput] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    failed_rows: int = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True)
class ImportResult:
    """
    Transient outcome of one import attempt. Never persisted.
    """

    success: bool
    message: str
    imported_count: int | None = None
    errors: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.imported_count is not None:
            payload["imported_count"] = self.imported_count
        if self.errors is not None:
            payload["errors"] = list(self.errors)
        return payload
