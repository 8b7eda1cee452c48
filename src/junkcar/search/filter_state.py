"""Live filter state with a memoized filtered view."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence, Union

from ..models.filters import FilterSpecification
from ..models.vehicle import Vehicle
from .predicates import filter_vehicles

if TYPE_CHECKING:
    from .saved_searches import SavedSearchRegistry

logger = logging.getLogger(__name__)


class FilterState:
    """Holds the current filter specification and derives the filtered view.

    The view is recomputed lazily on read, and only when the vehicle
    collection or the specification object changed since the last
    computation (identity comparison). Reads after a ``set_*`` call always
    reflect that call.
    """

    def __init__(
        self,
        vehicles: Sequence[Vehicle] = (),
        filters: Optional[FilterSpecification] = None,
    ):
        """Initialize filter state.

        Args:
            vehicles: Initial vehicle collection.
            filters: Initial specification (defaults to "match everything").
        """
        self._lock = threading.RLock()
        self._vehicles: Sequence[Vehicle] = vehicles
        self._filters = filters or FilterSpecification()
        self._view: List[Vehicle] = []
        self._computed_for: Optional[tuple] = None
        self.recompute_count = 0

    @property
    def filters(self) -> FilterSpecification:
        """Current filter specification."""
        with self._lock:
            return self._filters

    def set_filters(
        self, filters: Union[FilterSpecification, Mapping[str, Any]]
    ) -> FilterSpecification:
        """Replace the specification with a full or partial update.

        Args:
            filters: A complete specification, or a mapping of changed
                fields (e.g. ``{"status": "sold"}`` or
                ``{"priceRange": {"min": "500"}}``).

        Returns:
            The new current specification.
        """
        with self._lock:
            self._filters = self._filters.merged(filters)
            return self._filters

    def reset(self) -> None:
        """Clear every filter."""
        with self._lock:
            self._filters = FilterSpecification()

    @property
    def vehicles(self) -> Sequence[Vehicle]:
        with self._lock:
            return self._vehicles

    def set_vehicles(self, vehicles: Sequence[Vehicle]) -> None:
        """Replace the vehicle collection the view is derived from."""
        with self._lock:
            self._vehicles = vehicles

    @property
    def filtered_vehicles(self) -> List[Vehicle]:
        """Vehicles matching the current specification, in input order."""
        with self._lock:
            vehicles, filters = self._vehicles, self._filters
            if (
                self._computed_for is None
                or self._computed_for[0] is not vehicles
                or self._computed_for[1] is not filters
            ):
                self._view = filter_vehicles(vehicles, filters)
                self._computed_for = (vehicles, filters)
                self.recompute_count += 1
            return list(self._view)

    @property
    def total_results(self) -> int:
        return len(self.filtered_vehicles)

    @property
    def has_active_filters(self) -> bool:
        return self.filters.has_active_filters()

    def load_saved_search(self, registry: "SavedSearchRegistry", search_id: str) -> FilterSpecification:
        """Adopt the filters of a saved search.

        Raises:
            NotFoundError: If the saved search does not exist.
        """
        spec = registry.apply(search_id)
        with self._lock:
            self._filters = spec
        logger.debug(f"Loaded saved search {search_id}")
        return spec
