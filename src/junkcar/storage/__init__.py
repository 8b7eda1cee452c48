"""Storage layer for junkcar."""

from .supabase_client import SupabaseClient, VehiclePage
from .vehicle_store import VehicleStore

__all__ = ["SupabaseClient", "VehiclePage", "VehicleStore"]
