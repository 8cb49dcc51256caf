"""
Shared utility functions.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def safe_error_detail(exc: Exception, fallback: str = "An internal error occurred. Please try again later.") -> str:
    """
    Return a sanitized error message safe for client consumption.
    Logs the real exception detail server-side.
    """
    logger.error(f"Operation failed: {exc}", exc_info=True)
    return fallback


def utcnow() -> datetime:
    """Current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def utcnow_naive() -> datetime:
    """
    Naive UTC now — matches DB columns (TIMESTAMP WITHOUT TIME ZONE).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_z(value: datetime) -> str:
    """
    ISO-8601 with millisecond precision and a Z suffix, e.g. 2025-07-31T10:30:00.000Z.
    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with .5 going up (towards +inf).
    Python's round() is banker's rounding: round(22.5) == 22, here 23.
    """
    return int(math.floor(value + 0.5))


def format_thousands(value: int) -> str:
    return f"{value:,}"


def format_currency(value: int) -> str:
    return f"${value:,}"


def parse_int(value: Any) -> Optional[int]:
    """
    Parse ints that may arrive display-formatted ("245,000", "1 200").
    Returns None for anything that isn't a whole number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace(" ", "").replace("_", "")
        if cleaned.lstrip("-").isdigit():
            return int(cleaned)
    return None
