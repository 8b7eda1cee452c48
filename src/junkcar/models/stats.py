"""Dashboard statistics model."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class VehicleStats(BaseModel):
    """Summary numbers derived from a vehicle collection."""

    total_count: int = 0
    total_revenue: float = 0.0
    pending_paperwork_count: int = 0  # No title and still in the yard
    added_today_count: int = 0
    average_days_to_sell: int = 0
    average_profit: float = 0.0
    count_by_status: Dict[str, int] = Field(default_factory=dict)
