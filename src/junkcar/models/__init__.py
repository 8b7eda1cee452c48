"""Data models for junkcar."""

from .filters import ALL, NO_TITLE, DateRange, FilterSpecification, PriceRange
from .saved_search import SavedSearch
from .stats import VehicleStats
from .vehicle import SoldDetails, Vehicle, VehicleDocument, VehicleStatus

__all__ = [
    "ALL",
    "NO_TITLE",
    "DateRange",
    "FilterSpecification",
    "PriceRange",
    "SavedSearch",
    "SoldDetails",
    "Vehicle",
    "VehicleDocument",
    "VehicleStats",
    "VehicleStatus",
]
