"""
db/config.py

Where the unipole database lives, read from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

SUPPORTED_URL_PREFIXES: tuple[str, ...] = ("postgresql", "sqlite")
HOSTED_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})


def load_env_files() -> None:
    """
    Copy KEY=VALUE lines from `.env` then `.env.local` into os.environ.
    Variables already set in the process win.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_database_url(url: str) -> str:
    """
    Point postgres URLs at the psycopg driver; anything else is returned as is.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def is_supported_database_url(url: str) -> bool:
    return url.startswith(SUPPORTED_URL_PREFIXES)


def resolve_database_url() -> str:
    """
    Pick the URL the unit and campaign tables are stored at.

    DATABASE_URL always wins. Deployed instances (ENVIRONMENT set to one of
    HOSTED_ENVIRONMENTS) may use CLOUD_DATABASE_URL instead; everything else
    falls back to LOCAL_DATABASE_URL, usually a SQLite file.
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url:
        return normalize_database_url(direct_url)

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    hosted_url = os.getenv("CLOUD_DATABASE_URL")
    if environment in HOSTED_ENVIRONMENTS and hosted_url:
        return normalize_database_url(hosted_url)

    local_url = os.getenv("LOCAL_DATABASE_URL")
    if local_url:
        return normalize_database_url(local_url)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
