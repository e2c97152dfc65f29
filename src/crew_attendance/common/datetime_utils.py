from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional

from ..core.constants import MINUTES_PER_HOUR, SECONDS_PER_MINUTE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD, got {value!r}") from None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def minutes_between(start: datetime, end: datetime) -> float:
    """Unfloored minutes from ``start`` to ``end`` (negative if reversed)."""
    return (end - start).total_seconds() / SECONDS_PER_MINUTE


def format_minutes(total_minutes: float) -> Optional[str]:
    """Render a duration as ``"{h}h {m}m"``.

    Flooring happens here and only here. A zero total means "no data" and
    returns None so callers never show ``0h 0m`` for a missing day.
    """
    if not total_minutes:
        return None
    hours = math.floor(total_minutes / MINUTES_PER_HOUR)
    minutes = math.floor(total_minutes % MINUTES_PER_HOUR)
    return f"{hours}h {minutes}m"
