from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from crew_attendance.attendance.model import PunchEvent
from crew_attendance.attendance.service import AttendanceService
from crew_attendance.attendance.validator import PunchValidator
from crew_attendance.core.enums import PunchKind, PunchState, WorkerStatus
from crew_attendance.core.exceptions import InvalidTransition, ValidationError


class InMemoryPunches:
    def __init__(self, punches: Optional[list[PunchEvent]] = None):
        self._punches: list[PunchEvent] = list(punches or [])
        self._id = 0

    def list_between(self, *, start_date: date, end_date: date, worker_id=None):
        items = [
            p
            for p in self._punches
            if start_date <= p.work_date <= end_date and (worker_id is None or p.worker_id == worker_id)
        ]
        return sorted(items, key=lambda p: p.timestamp)

    def list_for_worker_on(self, worker_id: str, work_date: date):
        return self.list_between(start_date=work_date, end_date=work_date, worker_id=worker_id)

    def create(self, punch: PunchEvent) -> int:
        if any(
            p.worker_id == punch.worker_id and p.work_date == punch.work_date and p.kind == punch.kind
            for p in self._punches
        ):
            raise InvalidTransition("duplicate", worker_id=punch.worker_id, kind=punch.kind)
        self._id += 1
        self._punches.append(punch)
        return self._id

    @property
    def stored(self) -> list[PunchEvent]:
        return list(self._punches)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, 3, hour, minute)


def test_records_full_day_in_order():
    repo = InMemoryPunches()
    svc = AttendanceService(repo)

    for kind, when in [
        (PunchKind.ARRIVE_SITE, at(8)),
        (PunchKind.BREAK_START, at(12)),
        (PunchKind.BREAK_END, at(12, 30)),
        (PunchKind.DEPART_SITE, at(17)),
    ]:
        punch = svc.record_punch("w-1", kind, now=when, worksite_ref="site-9")
        assert punch.punch_id is not None
        assert punch.timestamp == when

    assert [p.kind for p in repo.stored] == list(PunchKind)
    assert all(p.worksite_ref == "site-9" for p in repo.stored)


def test_second_arrival_is_rejected_and_not_persisted():
    repo = InMemoryPunches()
    svc = AttendanceService(repo)
    svc.record_punch("w-1", PunchKind.ARRIVE_SITE, now=at(8))

    with pytest.raises(InvalidTransition):
        svc.record_punch("w-1", PunchKind.ARRIVE_SITE, now=at(8, 5))

    assert len(repo.stored) == 1


def test_depart_with_open_break_is_rejected():
    repo = InMemoryPunches()
    svc = AttendanceService(repo)
    svc.record_punch("w-1", "work_start", now=at(8))
    svc.record_punch("w-1", "lunch_start", now=at(12))

    with pytest.raises(InvalidTransition) as exc:
        svc.record_punch("w-1", "work_end", now=at(13))

    assert exc.value.state == PunchState.ON_BREAK


def test_strict_validator_blocks_depart_without_break():
    svc = AttendanceService(InMemoryPunches(), validator=PunchValidator(require_break=True))
    svc.record_punch("w-1", PunchKind.ARRIVE_SITE, now=at(8))

    with pytest.raises(InvalidTransition):
        svc.record_punch("w-1", PunchKind.DEPART_SITE, now=at(16))


def test_punches_on_previous_day_do_not_count_today():
    repo = InMemoryPunches([PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(2025, 3, 2, 8, 0))])
    svc = AttendanceService(repo)

    punch = svc.record_punch("w-1", PunchKind.ARRIVE_SITE, now=at(8))

    assert punch.kind == PunchKind.ARRIVE_SITE


def test_unknown_kind_and_blank_worker_are_validation_errors():
    svc = AttendanceService(InMemoryPunches())

    with pytest.raises(ValidationError):
        svc.record_punch("w-1", "coffee", now=at(8))
    with pytest.raises(ValidationError):
        svc.record_punch("  ", PunchKind.ARRIVE_SITE, now=at(8))


def test_today_view_measures_open_break_against_now():
    repo = InMemoryPunches(
        [
            PunchEvent("w-1", PunchKind.ARRIVE_SITE, at(8)),
            PunchEvent("w-1", PunchKind.BREAK_START, at(12)),
        ]
    )
    svc = AttendanceService(repo)

    view = svc.today("w-1", now=at(12, 20))

    assert view.state == PunchState.ON_BREAK
    assert view.status == WorkerStatus.ON_BREAK
    assert view.allowed == (PunchKind.BREAK_END,)
    assert view.worked.live is True
    assert view.worked.worked_minutes == 240
    assert view.worked.label == "4h 0m"


def test_today_view_for_worker_without_punches():
    view = AttendanceService(InMemoryPunches()).today("w-1", now=at(7))

    assert view.state == PunchState.NOT_STARTED
    assert view.status == WorkerStatus.OFF_SITE
    assert view.allowed == (PunchKind.ARRIVE_SITE,)
    assert view.worked is None


def test_allowed_kinds_after_arrival():
    repo = InMemoryPunches([PunchEvent("w-1", PunchKind.ARRIVE_SITE, at(8))])

    allowed = AttendanceService(repo).allowed_kinds("w-1", now=at(9))

    assert allowed == {PunchKind.BREAK_START, PunchKind.DEPART_SITE}
