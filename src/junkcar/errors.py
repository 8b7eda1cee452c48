"""Exception hierarchy for junkcar."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models.saved_search import SavedSearch


class JunkcarError(Exception):
    """Base exception for junkcar operations."""

    pass


class ValidationError(JunkcarError, ValueError):
    """User input failed a precondition (e.g. an empty saved-search name)."""

    pass


class NotFoundError(JunkcarError, KeyError):
    """A referenced record does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class PersistenceError(JunkcarError):
    """Saved-search storage could not be read or written.

    On write failures the in-memory change has already been applied, so the
    caller may keep working and warn the user that the change may be lost
    on reload.
    """

    def __init__(self, message: str, search: Optional["SavedSearch"] = None):
        super().__init__(message)
        self.search = search


class ConfigurationError(JunkcarError):
    """Required configuration is missing."""

    pass


class VehicleStoreError(JunkcarError):
    """A vehicle query or update against the backing store failed."""

    pass
