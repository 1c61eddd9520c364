"""
tests/conftest.py

Shared fixtures: an in-memory SQLite gateway, an API client bound to it,
and builders for spreadsheet payloads.
"""

from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterator, Sequence
from typing import Any

import pytest
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# app.main builds the application at import time and validates the environment.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import db.models  # noqa: E402,F401 registers all ORM models on Base.metadata
from db.base import Base  # noqa: E402
from db.session import build_session_factory, get_db  # noqa: E402

IMPORT_HEADERS = ["Unit ID", "Location", "Governorate", "Latitude,Longitude"]


def _xlsx_bytes(rows: Sequence[Sequence[Any]], headers: Sequence[Any] = IMPORT_HEADERS) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(list(headers))
    for row in rows:
        sheet.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _csv_bytes(rows: Sequence[Sequence[str]], headers: Sequence[str] = IMPORT_HEADERS) -> bytes:
    lines = [",".join(f'"{cell}"' for cell in headers)]
    lines.extend(",".join(f'"{cell}"' for cell in row) for row in rows)
    return ("\r\n".join(lines) + "\r\n").encode("utf-8")


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    return _xlsx_bytes


@pytest.fixture()
def make_csv() -> Callable[..., bytes]:
    return _csv_bytes


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    db = build_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session: Session):
    from fastapi.testclient import TestClient

    from app.main import app

    def _override_get_db() -> Iterator[Session]:
        yield session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
