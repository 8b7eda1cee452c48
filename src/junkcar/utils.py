"""Shared parsing helpers for vehicle field values.

Vehicle prices and dates arrive as loosely formatted strings. These helpers
never raise: a value that cannot be read is logged and replaced by a safe
default (0 for prices, the epoch for timestamps).
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Optional

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)

# Leading decimal number, as read by JavaScript's parseFloat
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Optional[str]) -> Optional[float]:
    """Read the leading decimal number from a string.

    Args:
        value: Raw string such as "1200", "1200.50" or "12abc".

    Returns:
        The parsed float, or None when no number leads the string.
    """
    if value is None:
        return None
    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        return None
    return float(match.group(0))


def parse_price(value: Optional[str], *, field: str = "price", record_id: str = "") -> float:
    """Parse a decimal-as-string price, defaulting to 0.

    Args:
        value: Raw price string (may be None).
        field: Field name for the warning message.
        record_id: Vehicle ID for the warning message.

    Returns:
        Parsed price, or 0.0 if absent or unparsable.
    """
    if value is None or str(value).strip() == "":
        return 0.0
    number = parse_number(value)
    if number is None:
        logger.warning(f"Unparsable {field} {value!r} on vehicle {record_id or '?'}, using 0")
        return 0.0
    return number


def parse_timestamp(
    value: Optional[str], *, field: str = "date", record_id: str = ""
) -> datetime:
    """Parse an ISO date or datetime string into naive local time.

    Timezone-aware values are converted to the local zone so that calendar
    comparisons happen in local time. Date-only strings become midnight.

    Args:
        value: Raw ISO string (a trailing "Z" is accepted).
        field: Field name for the warning message.
        record_id: Vehicle ID for the warning message.

    Returns:
        Parsed naive datetime, or the epoch if absent or unparsable.
    """
    if not value:
        logger.debug(f"Missing {field} on vehicle {record_id or '?'}, using epoch")
        return EPOCH
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparsable {field} {value!r} on vehicle {record_id or '?'}, using epoch")
        return EPOCH
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date_bound(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD filter bound.

    Returns:
        The date, or None when the bound is empty or malformed.
    """
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.warning(f"Ignoring malformed date bound {value!r}")
        return None
