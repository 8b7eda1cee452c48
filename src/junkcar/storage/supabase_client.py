"""Supabase client wrapper for vehicle queries and updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError
from supabase import Client, create_client

from ..config import get_settings
from ..errors import ConfigurationError, VehicleStoreError
from ..models.vehicle import SoldDetails, Vehicle, VehicleStatus

logger = logging.getLogger(__name__)

# Columns matched by server-side search (ilike OR)
SEARCH_COLUMNS = ("make", "model", "year", "vehicle_id", "license_plate")


@dataclass
class VehiclePage:
    """One page of vehicles plus paging metadata."""

    vehicles: List[Vehicle] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False


class SupabaseClient:
    """Wrapper for Supabase operations on the vehicles table.

    All methods are synchronous; async callers should run them in a worker
    thread.
    """

    def __init__(self, client: Optional[Client] = None):
        """Initialize Supabase client.

        Args:
            client: Pre-built client (for tests); created from settings if omitted.

        Raises:
            ConfigurationError: If SUPABASE_URL or SUPABASE_KEY is not set.
        """
        settings = get_settings()
        self.table_name = settings.vehicles_table
        self.page_size = settings.vehicles_page_size
        self.search_limit = settings.search_result_limit
        if client is None:
            if not settings.supabase_enabled:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")
            client = create_client(settings.supabase_url, settings.supabase_key)
        self.client: Client = client

    # ==================== Vehicle Queries ====================

    def fetch_vehicles_page(
        self,
        page: int = 1,
        search_term: str = "",
        page_size: Optional[int] = None,
    ) -> VehiclePage:
        """Fetch one page of vehicles, newest first.

        When a search term is given, paging is bypassed and every match up
        to the search limit is returned in one page.

        Args:
            page: 1-based page number (ignored while searching).
            search_term: Optional text matched against make, model, year,
                VIN fragment and license plate.
            page_size: Override for the configured page size.

        Returns:
            VehiclePage with the vehicles and paging metadata.

        Raises:
            VehicleStoreError: If the query fails.
        """
        page_size = page_size or self.page_size
        searching = bool(search_term.strip())

        query = (
            self.client.table(self.table_name)
            .select("*", count="exact")
            .order("created_at", desc=True)
        )

        if searching:
            pattern = f"%{search_term.strip().lower()}%"
            query = query.or_(",".join(f"{col}.ilike.{pattern}" for col in SEARCH_COLUMNS))
            query = query.limit(self.search_limit)
        else:
            offset = (max(page, 1) - 1) * page_size
            query = query.range(offset, offset + page_size - 1)

        try:
            result = query.execute()
        except APIError as e:
            raise VehicleStoreError(f"Failed to load vehicles: {e}") from e

        vehicles = self._rows_to_vehicles(result.data or [])
        total = result.count or 0
        has_more = False if searching else (max(page, 1) * page_size) < total

        logger.debug(
            f"Fetched {len(vehicles)} vehicles (page={page}, search={search_term!r}, total={total})"
        )
        return VehiclePage(vehicles=vehicles, total_count=total, has_more=has_more)

    def fetch_all_vehicles(self) -> List[Vehicle]:
        """Fetch every vehicle, newest first.

        Raises:
            VehicleStoreError: If the query fails.
        """
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as e:
            raise VehicleStoreError(f"Failed to load vehicles: {e}") from e
        return self._rows_to_vehicles(result.data or [])

    def update_vehicle_status(
        self,
        vehicle_id: str,
        status: VehicleStatus,
        sold: Optional[SoldDetails] = None,
    ) -> None:
        """Change a vehicle's status.

        Marking a vehicle sold records the buyer and sale details; any other
        status clears them.

        Args:
            vehicle_id: Vehicle row ID.
            status: New lifecycle status.
            sold: Buyer/sale details, used when status is SOLD.

        Raises:
            VehicleStoreError: If the update fails.
        """
        data: Dict[str, Any] = {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        if status == VehicleStatus.SOLD:
            if sold is not None:
                data.update(
                    {
                        "buyer_first_name": sold.buyer_first_name,
                        "buyer_last_name": sold.buyer_last_name,
                        "buyer_name": sold.buyer_name,
                        "sale_price": sold.sale_price,
                        "sale_date": sold.sale_date,
                    }
                )
        else:
            data.update(
                {
                    "buyer_first_name": None,
                    "buyer_last_name": None,
                    "buyer_name": None,
                    "sale_price": None,
                    "sale_date": None,
                }
            )

        try:
            self.client.table(self.table_name).update(data).eq("id", vehicle_id).execute()
        except APIError as e:
            raise VehicleStoreError(f"Failed to update vehicle {vehicle_id}: {e}") from e

    # ==================== Row Mapping ====================

    def _rows_to_vehicles(self, rows: List[Dict[str, Any]]) -> List[Vehicle]:
        """Convert database rows to Vehicle models, skipping invalid rows."""
        vehicles = []
        for row in rows:
            try:
                vehicles.append(Vehicle.model_validate(row))
            except PydanticValidationError as e:
                logger.warning(f"Skipping invalid vehicle row {row.get('id')}: {e}")
        return vehicles
