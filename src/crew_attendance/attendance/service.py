from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import PunchKind, PunchState, WorkerStatus
from ..core.exceptions import InvalidTransition, ValidationError
from ..hours.aggregator import HoursAggregator
from ..hours.model import DateWindow, DayAggregate
from .model import PunchEvent
from .repository import PunchRepository
from .validator import PunchValidator, state_of, status_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodayView:
    """Snapshot of a worker's current day for the clock screen."""

    worker_id: str
    work_date: date
    state: Optional[PunchState]
    status: WorkerStatus
    allowed: Tuple[PunchKind, ...]
    punches: Tuple[PunchEvent, ...]
    worked: Optional[DayAggregate]


class AttendanceService:
    def __init__(
        self,
        punches: PunchRepository,
        *,
        validator: Optional[PunchValidator] = None,
        aggregator: Optional[HoursAggregator] = None,
    ):
        self._punches = punches
        self._validator = validator or PunchValidator()
        self._aggregator = aggregator or HoursAggregator()

    def _today_punches(self, worker_id: str, today: date) -> Tuple[PunchEvent, ...]:
        return tuple(self._punches.list_for_worker_on(worker_id, today))

    def record_punch(
        self,
        worker_id: str,
        kind: PunchKind | str,
        *,
        now: Optional[datetime] = None,
        worksite_ref: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PunchEvent:
        """Validate and persist a punch; raise InvalidTransition when it is not allowed."""
        worker_id = require_non_empty(worker_id, "worker_id")
        try:
            kind = PunchKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown punch kind: {kind!r}") from None

        now = now or now_local()
        existing = {p.kind for p in self._today_punches(worker_id, now.date())}
        try:
            self._validator.validate(existing, kind, worker_id=worker_id)
        except InvalidTransition as e:
            logger.warning("Rejected %s for %s: %s", kind.value, worker_id, e)
            raise

        punch = PunchEvent(worker_id=worker_id, kind=kind, timestamp=now, worksite_ref=worksite_ref, note=note)
        punch_id = self._punches.create(punch)
        logger.info("Recorded %s for %s at %s", kind.value, worker_id, now.isoformat())
        return PunchEvent(
            punch_id=punch_id,
            worker_id=punch.worker_id,
            kind=punch.kind,
            timestamp=punch.timestamp,
            worksite_ref=punch.worksite_ref,
            note=punch.note,
        )

    def allowed_kinds(self, worker_id: str, *, now: Optional[datetime] = None) -> frozenset:
        now = now or now_local()
        return self._validator.allowed_kinds({p.kind for p in self._today_punches(worker_id, now.date())})

    def today(self, worker_id: str, *, now: Optional[datetime] = None) -> TodayView:
        worker_id = require_non_empty(worker_id, "worker_id")
        now = now or now_local()
        today = now.date()
        punches = self._today_punches(worker_id, today)
        kinds = {p.kind for p in punches}
        state = state_of(kinds)

        result = self._aggregator.aggregate(punches, (), DateWindow(today, today), now=now)
        total = result.worker_totals.get(worker_id)
        worked = total.days[0] if total and total.days else None

        return TodayView(
            worker_id=worker_id,
            work_date=today,
            state=state,
            status=status_for(state) if state is not None else WorkerStatus.OFF_SITE,
            allowed=tuple(k for k in PunchKind if k in self._validator.allowed_kinds(kinds)),
            punches=punches,
            worked=worked,
        )
