"""
Shared transaction handling for gateway repositories.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db.repositories.errors import ConstraintViolationError, PersistenceError

logger = logging.getLogger(__name__)


class SessionRepository:
    """
    Base for repositories whose writes are one transaction each.

    A failed write is rolled back before the gateway exception propagates,
    so callers never observe partial state.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _write(self, action: str) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning("Integrity failure while trying to %s: %s", action, exc.orig)
            raise ConstraintViolationError(f"Unable to {action}: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Database failure while trying to %s: %s", action, exc)
            raise PersistenceError(f"Unable to {action}: {exc}") from exc

    @contextmanager
    def _read(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PersistenceError(f"Unable to {action}: {exc}") from exc
