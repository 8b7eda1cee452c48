"""Dashboard stat aggregators.

Pure functions over any vehicle collection: pass the full inventory for
yard-wide numbers or a filtered view for numbers about the current search.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict, Iterable, Optional

from ..models.stats import VehicleStats
from ..models.vehicle import Vehicle, VehicleStatus
from ..utils import parse_price, parse_timestamp

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def total_count(vehicles: Iterable[Vehicle]) -> int:
    return sum(1 for _ in vehicles)


def total_revenue(vehicles: Iterable[Vehicle]) -> float:
    """Sum of sale prices; vehicles without one contribute nothing."""
    return sum(
        parse_price(v.sale_price, field="sale_price", record_id=v.id)
        for v in vehicles
        if v.sale_price is not None
    )


def pending_paperwork_count(vehicles: Iterable[Vehicle]) -> int:
    """Vehicles still in the yard without a title."""
    return sum(1 for v in vehicles if not v.title_present and v.status == VehicleStatus.YARD)


def added_today_count(vehicles: Iterable[Vehicle], today: Optional[date] = None) -> int:
    """Vehicles whose local creation date is today."""
    today = today or date.today()
    count = 0
    for v in vehicles:
        created = parse_timestamp(v.created_at, field="created_at", record_id=v.id)
        if created.date() == today:
            count += 1
    return count


def average_days_to_sell(vehicles: Iterable[Vehicle]) -> int:
    """Mean whole days from purchase to sale over sold vehicles.

    Only sold vehicles with both a purchase and a sale date count. Each
    vehicle contributes the floor of its day difference; the mean is rounded
    half-up. Returns 0 when no vehicle qualifies.
    """
    days = []
    for v in vehicles:
        if v.status != VehicleStatus.SOLD or not v.purchase_date or not v.sale_date:
            continue
        purchased = parse_timestamp(v.purchase_date, field="purchase_date", record_id=v.id)
        sold = parse_timestamp(v.sale_date, field="sale_date", record_id=v.id)
        days.append(math.floor((sold - purchased).total_seconds() / SECONDS_PER_DAY))

    if not days:
        return 0
    return math.floor(sum(days) / len(days) + 0.5)


def average_profit(vehicles: Iterable[Vehicle]) -> float:
    """Mean of sale price minus purchase price over sold vehicles with both."""
    profits = [
        parse_price(v.sale_price, field="sale_price", record_id=v.id)
        - parse_price(v.purchase_price, field="purchase_price", record_id=v.id)
        for v in vehicles
        if v.status == VehicleStatus.SOLD and v.sale_price and v.purchase_price
    ]
    if not profits:
        return 0.0
    return sum(profits) / len(profits)


def count_by_status(vehicles: Iterable[Vehicle]) -> Dict[str, int]:
    """Vehicle count per lifecycle status (every status is present)."""
    counts = {status.value: 0 for status in VehicleStatus}
    for v in vehicles:
        counts[v.status.value] += 1
    return counts


def summarize(vehicles: Iterable[Vehicle], today: Optional[date] = None) -> VehicleStats:
    """Compute every dashboard number in one call."""
    vehicles = list(vehicles)
    stats = VehicleStats(
        total_count=total_count(vehicles),
        total_revenue=total_revenue(vehicles),
        pending_paperwork_count=pending_paperwork_count(vehicles),
        added_today_count=added_today_count(vehicles, today),
        average_days_to_sell=average_days_to_sell(vehicles),
        average_profit=average_profit(vehicles),
        count_by_status=count_by_status(vehicles),
    )
    logger.debug(f"Summarized {stats.total_count} vehicles")
    return stats
