"""
Shared datetime helpers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, keeping its original offset."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def to_date_string(value: str) -> str:
    """Reduce an ISO 8601 timestamp to ``YYYY-MM-DD``.

    The calendar date is taken in the timestamp's own offset, i.e. the day
    the author saw. Unparseable values are returned unchanged.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return value.strip() if value else ""
    return parsed.date().isoformat()
