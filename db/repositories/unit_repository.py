"""
Unit repository: CRUD keyed on the opaque id, bulk upsert keyed on unit_id.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import delete, distinct, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.domain.unit import UnitInput
from db.base import utcnow
from db.models.unit import Unit
from db.repositories.base import SessionRepository
from db.repositories.errors import PersistenceError, UnitNotFoundError

_DEFAULT_BATCH_SIZE = 500

UNIT_FIELDS: tuple[str, ...] = ("unit_id", "location", "governorate", "lat_lng")

SORTABLE_FIELDS = {
    "unit_id": Unit.unit_id,
    "location": Unit.location,
    "governorate": Unit.governorate,
    "created_at": Unit.created_at,
    "updated_at": Unit.updated_at,
}


def _dialect_insert(session: Session) -> Callable[..., Any]:
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise PersistenceError(f"Bulk upsert is not supported on the {dialect!r} dialect.")


def parse_record_ids(values: Iterable[Any]) -> list[uuid.UUID]:
    """
    Convert stored id strings to UUIDs, dropping anything malformed.
    """

    parsed: list[uuid.UUID] = []
    for value in values:
        if isinstance(value, uuid.UUID):
            parsed.append(value)
            continue
        try:
            parsed.append(uuid.UUID(str(value)))
        except ValueError:
            continue
    return parsed


class UnitRepository(SessionRepository):
    def list_units(
        self,
        *,
        search: str | None = None,
        governorate: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[Unit]:
        """
        Return units, newest first unless another ordering is requested.

        ``search`` is a case-insensitive substring match on unit_id or location.
        """

        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValueError(f"Unsupported sort field '{sort_by}'. Allowed: {sorted(SORTABLE_FIELDS)}.")

        stmt = select(Unit)
        term = (search or "").strip().lower()
        if term:
            stmt = stmt.where(
                or_(
                    func.lower(Unit.unit_id).contains(term, autoescape=True),
                    func.lower(Unit.location).contains(term, autoescape=True),
                )
            )
        if governorate:
            stmt = stmt.where(Unit.governorate == governorate)

        stmt = stmt.order_by(column.desc() if descending else column.asc(), Unit.id)
        with self._read("list units"):
            return list(self._session.scalars(stmt).all())

    def list_governorates(self) -> list[str]:
        stmt = select(distinct(Unit.governorate)).order_by(Unit.governorate)
        with self._read("list governorates"):
            return list(self._session.scalars(stmt).all())

    def get(self, unit_pk: uuid.UUID) -> Unit:
        with self._read("load unit"):
            unit = self._session.get(Unit, unit_pk)
        if unit is None:
            raise UnitNotFoundError(f"Unit not found: {unit_pk}")
        return unit

    def get_many(self, unit_pks: Iterable[Any]) -> list[Unit]:
        """
        Load the units whose ids are given; unknown ids are ignored.
        """

        ids = parse_record_ids(unit_pks)
        if not ids:
            return []
        stmt = select(Unit).where(Unit.id.in_(ids)).order_by(Unit.created_at.desc(), Unit.id)
        with self._read("load units"):
            return list(self._session.scalars(stmt).all())

    def get_by_unit_id(self, unit_id: str) -> Unit | None:
        stmt = select(Unit).where(Unit.unit_id == unit_id)
        with self._read("look up unit by unit_id"):
            return self._session.scalars(stmt).one_or_none()

    def create(self, unit: UnitInput) -> Unit:
        record = Unit(**unit.as_dict())
        with self._write("create unit"):
            self._session.add(record)
            self._session.flush()
        return record

    def update(self, unit_pk: uuid.UUID, changes: Mapping[str, Any]) -> Unit:
        """
        Merge the given fields into an existing unit and stamp updated_at.
        """

        unknown = set(changes) - set(UNIT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown unit fields: {sorted(unknown)}")

        record = self.get(unit_pk)
        with self._write("update unit"):
            for field_name, value in changes.items():
                setattr(record, field_name, value)
            record.updated_at = utcnow()
            self._session.flush()
        return record

    def delete(self, unit_pk: uuid.UUID) -> None:
        record = self.get(unit_pk)
        with self._write("delete unit"):
            self._session.delete(record)

    def delete_all(self) -> int:
        with self._write("delete all units"):
            result = self._session.execute(delete(Unit))
        return result.rowcount or 0

    def bulk_upsert(
        self,
        units: Sequence[UnitInput],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> list[Unit]:
        """
        Insert-or-overwrite units keyed on unit_id, as one transaction.

        Later entries win when the same unit_id appears more than once.
        Existing rows keep their id and created_at.
        """

        if not units:
            return []

        deduplicated: dict[str, UnitInput] = {}
        for unit in units:
            deduplicated[unit.unit_id] = unit

        now = utcnow()
        payloads: list[dict[str, Any]] = [
            {"id": uuid.uuid4(), **unit.as_dict(), "created_at": now, "updated_at": now}
            for unit in deduplicated.values()
        ]

        insert = _dialect_insert(self._session)
        size = max(1, batch_size)
        with self._write("upsert units"):
            for start in range(0, len(payloads), size):
                stmt = insert(Unit).values(payloads[start : start + size])
                stmt = stmt.on_conflict_do_update(
                    index_elements=["unit_id"],
                    set_={
                        "location": stmt.excluded.location,
                        "governorate": stmt.excluded.governorate,
                        "lat_lng": stmt.excluded.lat_lng,
                        "updated_at": stmt.excluded.updated_at,
                    },
                )
                self._session.execute(stmt)

        stored = (
            select(Unit)
            .where(Unit.unit_id.in_(list(deduplicated)))
            .order_by(Unit.unit_id)
            .execution_options(populate_existing=True)
        )
        with self._read("load upserted units"):
            return list(self._session.scalars(stored).all())
