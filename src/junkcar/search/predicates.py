"""Filter predicate engine for advanced vehicle search.

Applies a FilterSpecification to a vehicle collection. Every active clause
must match (logical AND); inactive clauses never exclude a vehicle. The
result keeps the input order and never contains records that were not in
the input.

Malformed prices and dates on a vehicle are logged and read as 0 / epoch so
one bad row cannot abort the pass.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, time
from typing import Iterable, List, Optional, Tuple

from ..models.filters import ALL, NO_TITLE, FilterSpecification
from ..models.vehicle import Vehicle
from ..utils import parse_date_bound, parse_number, parse_price, parse_timestamp

logger = logging.getLogger(__name__)

# End dates are widened to the last second of the day
END_OF_DAY = time(23, 59, 59)


def searchable_text(vehicle: Vehicle) -> str:
    """Lower-cased text the free-text search term is matched against."""
    parts = [
        vehicle.make,
        vehicle.model,
        vehicle.year,
        vehicle.vehicle_id,
        vehicle.license_plate,
        vehicle.buyer_first_name,
        vehicle.buyer_last_name,
        vehicle.seller_name,
        vehicle.buyer_full_name,
    ]
    return " ".join(p for p in parts if p).lower()


def effective_price(vehicle: Vehicle) -> float:
    """Sale price if known, else purchase price, else 0."""
    if vehicle.sale_price is not None:
        return parse_price(vehicle.sale_price, field="sale_price", record_id=vehicle.id)
    return parse_price(vehicle.purchase_price, field="purchase_price", record_id=vehicle.id)


def matches_search_term(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    term = spec.search_term.strip().lower()
    if not term:
        return True
    return term in searchable_text(vehicle)


def matches_status(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    if spec.status == ALL:
        return True
    return vehicle.status == spec.status


def matches_paperwork(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    """Paperwork clause; "no-title" checks the title flag, not the string."""
    if spec.paperwork == ALL:
        return True
    if spec.paperwork == NO_TITLE:
        return vehicle.title_present is False
    return vehicle.paperwork == spec.paperwork


def price_bounds(spec: FilterSpecification) -> Tuple[float, float]:
    """Resolve the (min, max) price bounds of a specification.

    An empty minimum is 0 and an empty maximum is unbounded. A bound that is
    not a number is logged and left open.
    """
    low, high = 0.0, math.inf
    if spec.price_range.min:
        parsed = parse_number(spec.price_range.min)
        if parsed is None:
            logger.warning(f"Ignoring non-numeric minimum price {spec.price_range.min!r}")
        else:
            low = parsed
    if spec.price_range.max:
        parsed = parse_number(spec.price_range.max)
        if parsed is None:
            logger.warning(f"Ignoring non-numeric maximum price {spec.price_range.max!r}")
        else:
            high = parsed
    return low, high


def matches_price_range(
    vehicle: Vehicle,
    spec: FilterSpecification,
    bounds: Optional[Tuple[float, float]] = None,
) -> bool:
    if not spec.price_range.is_active:
        return True
    low, high = bounds or price_bounds(spec)
    price = effective_price(vehicle)
    return low <= price <= high


def date_bounds(spec: FilterSpecification) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Resolve the (start, end) creation-date bounds in local time."""
    start_day = parse_date_bound(spec.date_range.start_date)
    end_day = parse_date_bound(spec.date_range.end_date)
    start = datetime.combine(start_day, time.min) if start_day else None
    end = datetime.combine(end_day, END_OF_DAY) if end_day else None
    return start, end


def matches_date_range(
    vehicle: Vehicle,
    spec: FilterSpecification,
    bounds: Optional[Tuple[Optional[datetime], Optional[datetime]]] = None,
) -> bool:
    if not spec.date_range.is_active:
        return True
    start, end = bounds or date_bounds(spec)
    created = parse_timestamp(vehicle.created_at, field="created_at", record_id=vehicle.id)
    if start is not None and created < start:
        return False
    if end is not None and created > end:
        return False
    return True


def matches_has_images(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    if spec.has_images is None:
        return True
    return vehicle.has_images == spec.has_images


def matches_has_documents(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    if spec.has_documents is None:
        return True
    return vehicle.has_documents == spec.has_documents


def matches(vehicle: Vehicle, spec: FilterSpecification) -> bool:
    """Check a single vehicle against every clause of the specification."""
    return (
        matches_search_term(vehicle, spec)
        and matches_status(vehicle, spec)
        and matches_paperwork(vehicle, spec)
        and matches_price_range(vehicle, spec)
        and matches_date_range(vehicle, spec)
        and matches_has_images(vehicle, spec)
        and matches_has_documents(vehicle, spec)
    )


def filter_vehicles(
    vehicles: Iterable[Vehicle], spec: Optional[FilterSpecification] = None
) -> List[Vehicle]:
    """Return the vehicles matching ``spec``, preserving input order.

    Args:
        vehicles: Vehicle collection (full inventory or a prior result).
        spec: Filter specification; None behaves like the default spec.

    Returns:
        A new list with the matching vehicles.
    """
    vehicles = list(vehicles)
    if spec is None or not spec.has_active_filters():
        return vehicles

    # Bounds are resolved once per pass rather than per vehicle
    prices = price_bounds(spec) if spec.price_range.is_active else None
    dates = date_bounds(spec) if spec.date_range.is_active else None

    result = []
    for vehicle in vehicles:
        if not matches_search_term(vehicle, spec):
            continue
        if not matches_status(vehicle, spec):
            continue
        if not matches_paperwork(vehicle, spec):
            continue
        if not matches_price_range(vehicle, spec, prices):
            continue
        if not matches_date_range(vehicle, spec, dates):
            continue
        if not matches_has_images(vehicle, spec):
            continue
        if not matches_has_documents(vehicle, spec):
            continue
        result.append(vehicle)

    logger.debug(f"Filtered {len(vehicles)} vehicles down to {len(result)}")
    return result
