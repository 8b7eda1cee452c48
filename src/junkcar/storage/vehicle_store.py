"""In-memory vehicle collection backed by Supabase.

Holds the vehicles the filter engine reads from, with paging for the
inventory list and guarded status updates.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import List, Optional, Set

import anyio

from ..models.vehicle import SoldDetails, Vehicle, VehicleStatus
from .supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class VehicleStore:
    """Vehicle record store.

    Loads pages of vehicles from Supabase into memory. Blocking Supabase
    calls run in a worker thread so the event loop stays free.
    """

    def __init__(self, db: Optional[SupabaseClient] = None):
        """Initialize the store.

        Args:
            db: Supabase client instance (creates new one if not provided).
        """
        self.db = db or SupabaseClient()
        self._vehicles: List[Vehicle] = []
        self._updates_in_progress: Set[str] = set()
        self.total_count = 0
        self.has_more = True
        self.current_page = 1
        self.search_term = ""
        self.is_loaded = False

    @property
    def vehicles(self) -> List[Vehicle]:
        """Copy of the loaded vehicles; callers cannot change the store."""
        return [v.model_copy(deep=True) for v in self._vehicles]

    async def load_page(
        self,
        page: int = 1,
        search_term: str = "",
        append: bool = False,
    ) -> List[Vehicle]:
        """Load a page of vehicles into the store.

        Args:
            page: 1-based page number.
            search_term: Optional server-side search (disables paging).
            append: Add to the loaded vehicles instead of replacing them.
                Ignored while searching.

        Returns:
            The vehicles now held by the store.

        Raises:
            VehicleStoreError: If the query fails (the store is left empty).
        """
        searching = bool(search_term.strip())
        try:
            result = await anyio.to_thread.run_sync(
                partial(self.db.fetch_vehicles_page, page, search_term)
            )
        except Exception:
            logger.exception("Failed to load vehicles")
            self._vehicles = []
            self.total_count = 0
            self.has_more = False
            self.is_loaded = True
            raise

        if append and not searching:
            self._vehicles = self._vehicles + result.vehicles
        else:
            self._vehicles = list(result.vehicles)

        self.total_count = result.total_count
        self.has_more = result.has_more
        self.current_page = page
        self.search_term = search_term
        self.is_loaded = True
        logger.info(f"Loaded {len(self._vehicles)} of {self.total_count} vehicles")
        return self.vehicles

    async def load_more(self) -> List[Vehicle]:
        """Append the next page, if there is one."""
        if not self.has_more or self.search_term.strip():
            return self.vehicles
        return await self.load_page(self.current_page + 1, append=True)

    async def refresh(self) -> List[Vehicle]:
        """Reload the full inventory from the database."""
        logger.debug("Refreshing vehicles from database")
        try:
            vehicles = await anyio.to_thread.run_sync(self.db.fetch_all_vehicles)
        except Exception:
            logger.exception("Failed to refresh vehicles")
            self._vehicles = []
            self.is_loaded = True
            raise
        self._vehicles = vehicles
        self.total_count = len(vehicles)
        self.has_more = False
        self.search_term = ""
        self.is_loaded = True
        return self.vehicles

    async def update_status(
        self,
        vehicle_id: str,
        status: VehicleStatus,
        sold: Optional[SoldDetails] = None,
    ) -> bool:
        """Change a vehicle's status and reload the inventory.

        A second update for a vehicle that is already being updated is
        skipped.

        Returns:
            True if the update ran, False if it was skipped.

        Raises:
            VehicleStoreError: If the update or the reload fails.
        """
        if vehicle_id in self._updates_in_progress:
            logger.info(f"Update already in progress for vehicle {vehicle_id}")
            return False

        self._updates_in_progress.add(vehicle_id)
        try:
            await anyio.to_thread.run_sync(
                partial(self.db.update_vehicle_status, vehicle_id, status, sold)
            )
            logger.info(f"Vehicle {vehicle_id} status set to {status.value}")
            await self.refresh()
            return True
        except Exception:
            logger.exception(f"Failed to update vehicle {vehicle_id} status")
            raise
        finally:
            self._updates_in_progress.discard(vehicle_id)
