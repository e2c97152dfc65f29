from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_between
from ..model import DayAggregate, DayPunches
from .base import WorkedTimeCalculator

logger = logging.getLogger(__name__)


class StandardWorkedTimeCalculator(WorkedTimeCalculator):
    """Standard rule: (depart - arrive) - (break end - break start).

    When ``now`` falls on the day being reduced and the worker has not left
    yet, the day is measured up to ``now`` and an open break is deducted up
    to ``now`` as well. Days without that live context need both an arrival
    and a departure, otherwise they contribute zero.
    """

    def reduce_day(self, day: DayPunches, *, now: Optional[datetime] = None) -> DayAggregate:
        if day.arrive_at is None:
            return DayAggregate(work_date=day.work_date, worker_id=day.worker_id, worked_minutes=0.0, complete=False, punches=day)

        live = day.depart_at is None and now is not None and now.date() == day.work_date
        if day.depart_at is None and not live:
            return DayAggregate(work_date=day.work_date, worker_id=day.worker_id, worked_minutes=0.0, complete=False, punches=day)

        end = day.depart_at if day.depart_at is not None else now
        minutes = minutes_between(day.arrive_at, end)

        if day.break_start_at is not None and day.break_end_at is not None:
            minutes -= minutes_between(day.break_start_at, day.break_end_at)
        elif live and day.break_start_at is not None:
            minutes -= minutes_between(day.break_start_at, now)

        if minutes < 0:
            logger.warning(
                "Negative worked time (%.1f min) for %s on %s; counting zero",
                minutes,
                day.worker_id,
                day.work_date.isoformat(),
            )
            minutes = 0.0

        return DayAggregate(
            work_date=day.work_date,
            worker_id=day.worker_id,
            worked_minutes=minutes,
            complete=not live,
            live=live,
            punches=day,
        )
