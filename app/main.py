from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.logging_utils import configure_logging


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - A database URL must resolve (DATABASE_URL, CLOUD_DATABASE_URL or
      LOCAL_DATABASE_URL) to PostgreSQL or SQLite.
    - PUBLIC_BASE_URL, when set, must be an http(s) origin.
    - LOG_LEVEL, when set, must name a standard logging level.
    """

    from db.config import is_supported_database_url, load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    try:
        database_url = resolve_database_url()
    except RuntimeError as exc:
        errors.append(str(exc))
    else:
        if not is_supported_database_url(database_url):
            errors.append(
                "Database URL scheme is not supported. Use a PostgreSQL or SQLite URL."
            )

    # --- Share links ----------------------------------------------------
    base_url = os.getenv("PUBLIC_BASE_URL", "").strip()
    if base_url and not base_url.startswith(("http://", "https://")):
        errors.append(
            f"PUBLIC_BASE_URL='{base_url}' is not valid. It must start with http:// or https://."
        )

    # --- Logging --------------------------------------------------------
    log_level = os.getenv("LOG_LEVEL", "").strip().upper()
    if log_level and not isinstance(logging.getLevelName(log_level), int):
        errors.append(
            f"LOG_LEVEL='{log_level}' is not valid. Use DEBUG, INFO, WARNING, ERROR or CRITICAL."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed. Missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Compare Base.metadata table names against the live DB schema.

    Every table registered on Base.metadata must exist in the database.
    If any are missing, log a critical error and abort startup so that
    the operator is forced to run migrations before serving traffic.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        log = logging.getLogger(__name__)
        log.critical(
            "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
            "the database: %s. Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema before serving requests."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    configure_logging()

    application = FastAPI(
        title="Unipole API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import (
        backup_router,
        campaigns_router,
        settings_router,
        units_router,
    )

    application.include_router(units_router)
    application.include_router(campaigns_router)
    application.include_router(settings_router)
    application.include_router(backup_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
