"""Saved search registry: durable, named filter snapshots.

The registry is storage-agnostic; it talks to a ``SavedSearchStorage`` port
with two operations (load the whole list, save the whole list). A JSON file
adapter and an in-memory adapter are provided.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..errors import NotFoundError, PersistenceError, ValidationError
from ..models.filters import FilterSpecification
from ..models.saved_search import SavedSearch

logger = logging.getLogger(__name__)

_SEARCH_LIST = TypeAdapter(List[SavedSearch])


class SavedSearchStorage(Protocol):
    """Port for persisting the saved search list.

    Adapters should raise ``PersistenceError`` on failure. The registry also
    wraps ``OSError`` and ``ValueError`` from adapters that do not.
    """

    def load(self) -> List[SavedSearch]:
        """Return every stored search, in insertion order."""
        ...

    def save(self, searches: List[SavedSearch]) -> None:
        """Replace the stored list."""
        ...


class InMemorySearchStorage:
    """Non-durable storage for tests and throwaway sessions."""

    def __init__(self, searches: Optional[List[SavedSearch]] = None):
        self._searches: List[SavedSearch] = list(searches or [])
        self.save_count = 0

    def load(self) -> List[SavedSearch]:
        return list(self._searches)

    def save(self, searches: List[SavedSearch]) -> None:
        self._searches = list(searches)
        self.save_count += 1


class JsonFileSearchStorage:
    """Stores saved searches as a camelCase JSON array in a local file."""

    def __init__(self, path: Path):
        """Initialize file storage.

        Args:
            path: JSON file to read and write. Missing files read as empty.
        """
        self.path = Path(path)

    def load(self) -> List[SavedSearch]:
        """Read the stored searches.

        Raises:
            PersistenceError: If the file cannot be read or parsed.
        """
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            return _SEARCH_LIST.validate_json(raw)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            raise PersistenceError(f"Could not read saved searches from {self.path}: {e}") from e

    def save(self, searches: List[SavedSearch]) -> None:
        """Write the full list, replacing the file atomically.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        payload = [s.model_dump(mode="json", by_alias=True) for s in searches]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write saved searches to {self.path}: {e}") from e


class SavedSearchRegistry:
    """Named filter snapshots with create/list/apply/delete.

    Every mutation is applied in memory first and then persisted. If the
    write fails the in-memory change stays and a ``PersistenceError`` is
    raised so the caller can warn that it may not survive a reload.
    """

    def __init__(self, storage: SavedSearchStorage):
        """Initialize the registry and load existing searches.

        Args:
            storage: Persistence port. A failing read leaves the registry empty.
        """
        self.storage = storage
        self._searches: List[SavedSearch] = []
        self._last_id = 0
        self._load()

    def _load(self) -> None:
        try:
            self._searches = list(self.storage.load())
        except (PersistenceError, OSError, ValueError) as e:
            self._searches = []
            logger.error(f"Error loading saved searches: {e}")
            return
        for search in self._searches:
            if search.id.isdigit():
                self._last_id = max(self._last_id, int(search.id))

    def _persist(self, search: Optional[SavedSearch] = None) -> None:
        try:
            self.storage.save(list(self._searches))
        except (PersistenceError, OSError, ValueError) as e:
            logger.warning(f"Saved searches changed in memory but were not persisted: {e}")
            raise PersistenceError(str(e), search=search) from e

    def _next_id(self) -> str:
        """Millisecond timestamp, bumped to stay unique within the registry."""
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def list(self) -> List[SavedSearch]:
        """All saved searches in insertion order."""
        return list(self._searches)

    def get(self, search_id: str) -> Optional[SavedSearch]:
        for search in self._searches:
            if search.id == search_id:
                return search
        return None

    def save(self, name: str, spec: FilterSpecification) -> SavedSearch:
        """Save a snapshot of ``spec`` under ``name``.

        Args:
            name: Display name; surrounding whitespace is stripped.
            spec: Filter specification to snapshot.

        Returns:
            The new saved search.

        Raises:
            ValidationError: If the name is empty.
            PersistenceError: If the write failed (the search is still kept).
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter a name for the search")

        search = SavedSearch(
            id=self._next_id(),
            name=name,
            filters=spec.model_copy(deep=True),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._searches.append(search)
        logger.info(f"Saved search {search.name!r} ({search.id})")
        self._persist(search)
        return search

    def remove(self, search_id: str) -> None:
        """Delete a saved search; unknown IDs are ignored.

        Raises:
            PersistenceError: If the write failed (the search is still removed).
        """
        search = self.get(search_id)
        if search is None:
            logger.debug(f"Saved search {search_id} not found, nothing to delete")
            return
        self._searches = [s for s in self._searches if s.id != search_id]
        logger.info(f"Deleted saved search {search.name!r} ({search.id})")
        self._persist(search)

    def apply(self, search_id: str) -> FilterSpecification:
        """Return the stored filter snapshot for ``search_id``.

        Raises:
            NotFoundError: If no saved search has that ID.
        """
        search = self.get(search_id)
        if search is None:
            raise NotFoundError(f"Saved search not found: {search_id}")
        return search.filters
