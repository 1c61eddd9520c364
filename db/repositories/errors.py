"""
Repository-layer exceptions for the persistence gateway.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for persistence gateway failures."""


class RecordNotFoundError(RepositoryError):
    """Raised when a record addressed by its opaque id does not exist."""


class UnitNotFoundError(RecordNotFoundError):
    """Raised when a referenced unit does not exist."""


class CampaignNotFoundError(RecordNotFoundError):
    """Raised when a referenced campaign does not exist."""


class ConstraintViolationError(RepositoryError):
    """Raised when the store rejects a write on a uniqueness or integrity rule."""


class PersistenceError(RepositoryError):
    """Raised when the store fails for any other reason."""
