from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from ..common.datetime_utils import format_minutes
from ..core.exceptions import MalformedWindow
from ..leave.model import LeaveInterval


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise MalformedWindow(f"Window start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class DayPunches:
    """At most one timestamp per punch kind for one worker on one date."""

    worker_id: str
    work_date: date
    arrive_at: Optional[datetime] = None
    break_start_at: Optional[datetime] = None
    break_end_at: Optional[datetime] = None
    depart_at: Optional[datetime] = None


@dataclass(frozen=True)
class DayAggregate:
    """Worked time for one worker on one date.

    ``complete`` is False when the day lacks an arrival or a departure and
    therefore contributes nothing; a complete day may still measure zero.
    ``live`` marks a duration measured against the caller's ``now``.
    """

    work_date: date
    worker_id: str
    worked_minutes: float
    complete: bool
    live: bool = False
    punches: Optional[DayPunches] = None

    @property
    def label(self) -> Optional[str]:
        return format_minutes(self.worked_minutes)


@dataclass(frozen=True)
class PeriodTotal:
    worker_id: str
    worked_minutes: float
    leave_minutes: float
    days: Tuple[DayAggregate, ...] = ()
    leave: Tuple[LeaveInterval, ...] = ()

    @property
    def total_minutes(self) -> float:
        return self.worked_minutes + self.leave_minutes

    @property
    def has_data(self) -> bool:
        return self.total_minutes != 0

    @property
    def label(self) -> Optional[str]:
        """``"8h 30m"``, or None when there is nothing to report."""
        return format_minutes(self.total_minutes)


@dataclass(frozen=True)
class AggregationResult:
    window: DateWindow
    worker_totals: Dict[str, PeriodTotal] = field(default_factory=dict)
    population_total_minutes: float = 0.0

    @property
    def day_aggregates(self) -> Dict[str, Tuple[DayAggregate, ...]]:
        return {worker_id: total.days for worker_id, total in self.worker_totals.items()}

    @property
    def population_label(self) -> Optional[str]:
        return format_minutes(self.population_total_minutes)
