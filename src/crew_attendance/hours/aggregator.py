"""Reduce punches and approved leave into worked time.

Per worker and calendar date, one timestamp per punch kind is kept and the
day is reduced by a ``WorkedTimeCalculator``. Day minutes are summed per
worker, leave credit is added once per interval that touches the window, and
the worker totals are summed into a population total. Minutes stay
unfloored floats until presentation.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from ..attendance.model import PunchEvent
from ..core.enums import PunchKind
from ..leave.model import LeaveInterval
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator
from .model import AggregationResult, DateWindow, DayAggregate, DayPunches, PeriodTotal

logger = logging.getLogger(__name__)

_FIELD_BY_KIND = {
    PunchKind.ARRIVE_SITE: "arrive_at",
    PunchKind.BREAK_START: "break_start_at",
    PunchKind.BREAK_END: "break_end_at",
    PunchKind.DEPART_SITE: "depart_at",
}


def group_days(punches: Iterable[PunchEvent], window: DateWindow) -> Dict[Tuple[str, date], DayPunches]:
    """Bucket in-window punches by (worker, date); the earliest punch of a kind wins."""
    days: Dict[Tuple[str, date], DayPunches] = {}
    ordered = sorted(
        (p for p in punches if window.contains(p.work_date)),
        key=lambda p: (p.worker_id, p.timestamp),
    )
    for punch in ordered:
        key = (punch.worker_id, punch.work_date)
        day = days.get(key) or DayPunches(worker_id=punch.worker_id, work_date=punch.work_date)
        attr = _FIELD_BY_KIND[PunchKind(punch.kind)]
        if getattr(day, attr) is not None:
            logger.warning(
                "Duplicate %s punch for %s on %s ignored (kept %s)",
                PunchKind(punch.kind).value,
                punch.worker_id,
                punch.work_date.isoformat(),
                getattr(day, attr).isoformat(),
            )
            continue
        days[key] = replace(day, **{attr: punch.timestamp})
    return days


class HoursAggregator:
    def __init__(self, calculator: Optional[WorkedTimeCalculator] = None):
        self._calculator = calculator or StandardWorkedTimeCalculator()

    def aggregate(
        self,
        punches: Iterable[PunchEvent],
        leave: Iterable[LeaveInterval],
        window: DateWindow,
        *,
        now: Optional[datetime] = None,
    ) -> AggregationResult:
        """Compute day aggregates, worker totals and the population total.

        ``now`` enables the in-progress measurement for ``now``'s own date
        only; omit it for historical reports so results depend on the input
        snapshot alone.
        """
        days_by_worker: Dict[str, List[DayAggregate]] = defaultdict(list)
        for (worker_id, _), day in sorted(group_days(punches, window).items()):
            days_by_worker[worker_id].append(self._calculator.reduce_day(day, now=now))

        leave_by_worker: Dict[str, List[LeaveInterval]] = defaultdict(list)
        for interval in leave:
            if interval.overlaps(window.start, window.end):
                leave_by_worker[interval.worker_id].append(interval)

        totals: Dict[str, PeriodTotal] = {}
        for worker_id in sorted(set(days_by_worker) | set(leave_by_worker)):
            worker_days = tuple(days_by_worker.get(worker_id, ()))
            worker_leave = tuple(leave_by_worker.get(worker_id, ()))
            totals[worker_id] = PeriodTotal(
                worker_id=worker_id,
                worked_minutes=sum((d.worked_minutes for d in worker_days), 0.0),
                leave_minutes=sum((i.credited_minutes for i in worker_leave), 0.0),
                days=worker_days,
                leave=worker_leave,
            )

        population = sum((t.total_minutes for t in totals.values()), 0.0)
        logger.debug(
            "Aggregated %d worker(s) over %s..%s: %.1f min",
            len(totals),
            window.start.isoformat(),
            window.end.isoformat(),
            population,
        )
        return AggregationResult(window=window, worker_totals=totals, population_total_minutes=population)


def aggregate(
    punches: Iterable[PunchEvent],
    leave: Iterable[LeaveInterval],
    window: DateWindow,
    *,
    now: Optional[datetime] = None,
) -> AggregationResult:
    return HoursAggregator().aggregate(punches, leave, window, now=now)
