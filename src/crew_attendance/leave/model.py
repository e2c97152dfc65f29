from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.constants import MINUTES_PER_HOUR
from ..core.enums import LeaveKind
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LeaveInterval:
    """Approved absence credited as worked time.

    ``hours_credited`` is one flat credit for the whole interval, not a
    per-day rate.
    """

    worker_id: str
    start_date: date
    end_date: date
    hours_credited: float
    kind: LeaveKind = LeaveKind.SICK_LEAVE

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValidationError(
                f"Leave for {self.worker_id} ends ({self.end_date}) before it starts ({self.start_date})"
            )
        if self.hours_credited < 0:
            raise ValidationError(f"Leave for {self.worker_id} has negative hours")

    @property
    def credited_minutes(self) -> float:
        return float(self.hours_credited) * MINUTES_PER_HOUR

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start
