"""
tests/test_unit_repository.py

Gateway behaviour for units against in-memory SQLite.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.orm import Session

from app.domain.unit import UnitInput
from db.repositories.errors import ConstraintViolationError, UnitNotFoundError
from db.repositories.unit_repository import UnitRepository, parse_record_ids


@pytest.fixture()
def repo(session: Session) -> UnitRepository:
    return UnitRepository(session)


def _unit(unit_id: str, location: str = "Downtown Cairo", governorate: str = "Cairo", lat_lng: str = "30.0444,31.2357"):
    return UnitInput(unit_id=unit_id, location=location, governorate=governorate, lat_lng=lat_lng)


def test_create_and_get(repo: UnitRepository) -> None:
    created = repo.create(_unit("UNI001"))

    assert isinstance(created.id, uuid.UUID)
    assert created.created_at is not None
    assert repo.get(created.id).unit_id == "UNI001"


def test_get_missing_raises_not_found(repo: UnitRepository) -> None:
    with pytest.raises(UnitNotFoundError):
        repo.get(uuid.uuid4())


def test_get_by_unit_id_returns_none_when_absent(repo: UnitRepository) -> None:
    assert repo.get_by_unit_id("NOPE") is None


def test_duplicate_unit_id_violates_constraint_and_rolls_back(repo: UnitRepository) -> None:
    repo.create(_unit("UNI001"))

    with pytest.raises(ConstraintViolationError):
        repo.create(_unit("UNI001", location="Elsewhere"))

    units = repo.list_units()
    assert [(unit.unit_id, unit.location) for unit in units] == [("UNI001", "Downtown Cairo")]


def test_list_is_newest_first_by_default(repo: UnitRepository) -> None:
    for unit_id in ("A1", "B2", "C3"):
        repo.create(_unit(unit_id))

    assert [unit.unit_id for unit in repo.list_units()] == ["C3", "B2", "A1"]


def test_list_search_filter_and_sort(repo: UnitRepository) -> None:
    repo.create(_unit("UNI-100", location="Nile Corniche", governorate="Cairo"))
    repo.create(_unit("UNI-200", location="Stanley Bridge", governorate="Alexandria"))
    repo.create(_unit("ALX_300", location="Montaza nile view", governorate="Alexandria"))

    assert [u.unit_id for u in repo.list_units(search="NILE", sort_by="unit_id", descending=False)] == [
        "ALX_300",
        "UNI-100",
    ]
    assert [u.unit_id for u in repo.list_units(governorate="Alexandria", sort_by="unit_id", descending=False)] == [
        "ALX_300",
        "UNI-200",
    ]
    assert [u.unit_id for u in repo.list_units(search="_3")] == ["ALX_300"]
    assert repo.list_governorates() == ["Alexandria", "Cairo"]


def test_list_rejects_unknown_sort_field(repo: UnitRepository) -> None:
    with pytest.raises(ValueError):
        repo.list_units(sort_by="lat_lng")


def test_update_merges_fields_and_stamps_updated_at(repo: UnitRepository) -> None:
    created = repo.create(_unit("UNI001"))
    first_updated_at = created.updated_at

    updated = repo.update(created.id, {"location": "Tahrir Square"})

    assert updated.id == created.id
    assert updated.location == "Tahrir Square"
    assert updated.governorate == "Cairo"
    assert updated.updated_at >= first_updated_at


def test_update_rejects_unknown_fields(repo: UnitRepository) -> None:
    created = repo.create(_unit("UNI001"))

    with pytest.raises(ValueError):
        repo.update(created.id, {"id": uuid.uuid4()})


def test_delete(repo: UnitRepository) -> None:
    created = repo.create(_unit("UNI001"))

    repo.delete(created.id)

    assert repo.get_by_unit_id("UNI001") is None
    with pytest.raises(UnitNotFoundError):
        repo.delete(created.id)


def test_bulk_upsert_twice_keeps_one_unit_with_latest_values(repo: UnitRepository) -> None:
    repo.bulk_upsert([_unit("UNI001", location="First")])
    first = repo.get_by_unit_id("UNI001")
    first_id = first.id

    stored = repo.bulk_upsert([_unit("UNI001", location="Second", governorate="Giza")])

    units = repo.list_units()
    assert len(units) == 1
    assert units[0].id == first_id
    assert units[0].location == "Second"
    assert units[0].governorate == "Giza"
    assert [unit.location for unit in stored] == ["Second"]


def test_bulk_upsert_overwrites_form_created_unit_by_business_key(repo: UnitRepository) -> None:
    created = repo.create(_unit("UNI001"))

    repo.bulk_upsert([_unit("UNI001", lat_lng="29.9792,31.1342"), _unit("UNI002")])

    assert repo.get(created.id).lat_lng == "29.9792,31.1342"
    assert sorted(unit.unit_id for unit in repo.list_units()) == ["UNI001", "UNI002"]


def test_bulk_upsert_last_duplicate_in_batch_wins(repo: UnitRepository) -> None:
    stored = repo.bulk_upsert([_unit("UNI001", location="One"), _unit("UNI001", location="Two")], batch_size=1)

    assert len(stored) == 1
    assert stored[0].location == "Two"


def test_bulk_upsert_empty_batch(repo: UnitRepository) -> None:
    assert repo.bulk_upsert([]) == []


def test_get_many_ignores_unknown_and_malformed_ids(repo: UnitRepository) -> None:
    kept = repo.create(_unit("UNI001"))

    units = repo.get_many([str(kept.id), str(uuid.uuid4()), "not-a-uuid"])

    assert [unit.id for unit in units] == [kept.id]
    assert parse_record_ids(["nope", kept.id]) == [kept.id]
