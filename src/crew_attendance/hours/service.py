from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.repository import PunchRepository
from ..common.datetime_utils import format_minutes
from ..leave.repository import LeaveRepository
from .aggregator import HoursAggregator
from .model import AggregationResult, DateWindow, DayAggregate

REPORT_FIELDS = [
    "work_date",
    "worker_id",
    "arrive",
    "break_start",
    "break_end",
    "depart",
    "worked_hours",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    population_total: Optional[str]
    population_total_minutes: float


def _hhmm(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


class HoursReportService:
    def __init__(
        self,
        punches: PunchRepository,
        leave: LeaveRepository,
        *,
        aggregator: Optional[HoursAggregator] = None,
    ):
        self._punches = punches
        self._leave = leave
        self._aggregator = aggregator or HoursAggregator()

    def aggregate(
        self,
        *,
        start: date,
        end: date,
        worker_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AggregationResult:
        window = DateWindow(start, end)
        punches = self._punches.list_between(start_date=window.start, end_date=window.end, worker_id=worker_id)
        leave = self._leave.list_approved_overlapping(start_date=window.start, end_date=window.end, worker_id=worker_id)
        return self._aggregator.aggregate(punches, leave, window, now=now)

    def build_hours_report(
        self,
        *,
        start: date,
        end: date,
        worker_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ReportData:
        result = self.aggregate(start=start, end=end, worker_id=worker_id, now=now)

        rows: list[dict] = []
        summary: list[dict] = []
        for total in result.worker_totals.values():
            rows.extend(self._to_row(day) for day in total.days)
            summary.append(
                {
                    "worker_id": total.worker_id,
                    "days_worked": sum(1 for d in total.days if d.complete and d.worked_minutes > 0),
                    "worked_hours": format_minutes(total.worked_minutes),
                    "leave_hours": format_minutes(total.leave_minutes),
                    "total_hours": total.label,
                    "total_minutes": total.total_minutes,
                }
            )

        rows.sort(key=lambda r: (r["work_date"], r["worker_id"]))
        summary.sort(key=lambda s: (-s["total_minutes"], s["worker_id"]))
        return ReportData(
            rows=rows,
            summary=summary,
            population_total=result.population_label,
            population_total_minutes=result.population_total_minutes,
        )

    def _to_row(self, day: DayAggregate) -> dict:
        p = day.punches
        return {
            "work_date": day.work_date.strftime("%Y-%m-%d"),
            "worker_id": day.worker_id,
            "arrive": _hhmm(p.arrive_at) if p else None,
            "break_start": _hhmm(p.break_start_at) if p else None,
            "break_end": _hhmm(p.break_end_at) if p else None,
            "depart": _hhmm(p.depart_at) if p else None,
            "worked_hours": day.label,
        }
