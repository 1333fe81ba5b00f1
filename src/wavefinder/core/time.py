"""
Date parsing and trip-window helpers.

Travel dates arrive as ISO strings from the API/CLI. The trip month and trip
length are always derived from them here, so the rest of the code never has to
keep them in sync by hand.
"""

from __future__ import annotations

from datetime import date, datetime

DEFAULT_TRIP_DAYS = 7


def parse_date(value: str) -> date:
    """Parse an ISO-8601 date (or datetime) string into a `date`.

    Notes:
    - Accepts full timestamps (the time part is dropped) and a trailing `Z`.
    """
    value = value.strip()
    if len(value) == 10:
        return date.fromisoformat(value)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).date()


def trip_month(start: date) -> int:
    """Calendar month (1..12) the trip starts in."""
    return start.month


def trip_duration_days(start: date, end: date | None) -> int:
    """Inclusive day count; a trip without an end date counts as a week."""
    if end is None:
        return DEFAULT_TRIP_DAYS
    return (end - start).days + 1
