from __future__ import annotations

from datetime import date, datetime

import pytest

from crew_attendance.attendance.model import PunchEvent
from crew_attendance.core.enums import PunchKind
from crew_attendance.core.exceptions import MalformedWindow, ValidationError
from crew_attendance.hours.aggregator import HoursAggregator, aggregate, group_days
from crew_attendance.hours.model import DateWindow
from crew_attendance.leave.model import LeaveInterval


def full_day(worker_id: str, day: date, *, arrive=(8, 0), break_start=(12, 0), break_end=(12, 30), depart=(17, 0)):
    def ts(hm):
        return datetime(day.year, day.month, day.day, *hm)

    return [
        PunchEvent(worker_id, PunchKind.ARRIVE_SITE, ts(arrive)),
        PunchEvent(worker_id, PunchKind.BREAK_START, ts(break_start)),
        PunchEvent(worker_id, PunchKind.BREAK_END, ts(break_end)),
        PunchEvent(worker_id, PunchKind.DEPART_SITE, ts(depart)),
    ]


MON = date(2025, 3, 3)
TUE = date(2025, 3, 4)
WED = date(2025, 3, 5)


def test_single_full_day_yields_eight_and_a_half_hours():
    result = aggregate(full_day("w-1", MON), [], DateWindow(MON, MON))

    total = result.worker_totals["w-1"]
    assert total.total_minutes == 510
    assert total.label == "8h 30m"
    assert result.day_aggregates["w-1"][0].label == "8h 30m"


def test_arrival_only_day_is_reported_as_no_data():
    punches = [PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(2025, 3, 3, 8, 0))]

    result = aggregate(punches, [], DateWindow(MON, MON))

    total = result.worker_totals["w-1"]
    assert total.total_minutes == 0
    assert total.has_data is False
    assert total.label is None
    assert result.population_label is None
    assert total.days[0].complete is False


def test_leave_only_worker_gets_flat_credit():
    leave = [LeaveInterval("w-2", MON, WED, hours_credited=8)]

    result = aggregate([], leave, DateWindow(MON, WED))

    assert result.worker_totals["w-2"].total_minutes == 480
    assert result.worker_totals["w-2"].label == "8h 0m"
    assert result.worker_totals["w-2"].days == ()


def test_leave_starting_before_window_counts_in_full():
    leave = [LeaveInterval("w-2", date(2025, 3, 2), MON, hours_credited=16)]

    result = aggregate([], leave, DateWindow(MON, WED))

    assert result.worker_totals["w-2"].leave_minutes == 16 * 60


def test_leave_outside_window_is_ignored():
    leave = [
        LeaveInterval("w-2", date(2025, 2, 24), date(2025, 2, 28), hours_credited=40),
        LeaveInterval("w-3", date(2025, 3, 6), date(2025, 3, 7), hours_credited=8),
    ]

    result = aggregate([], leave, DateWindow(MON, WED))

    assert result.worker_totals == {}
    assert result.population_total_minutes == 0


def test_each_overlapping_interval_is_credited_once():
    leave = [
        LeaveInterval("w-1", MON, MON, hours_credited=4),
        LeaveInterval("w-1", TUE, WED, hours_credited=8),
    ]

    result = aggregate(full_day("w-1", MON), leave, DateWindow(MON, WED))

    total = result.worker_totals["w-1"]
    assert total.worked_minutes == 510
    assert total.leave_minutes == 12 * 60
    assert total.label == "20h 30m"


def test_population_total_is_sum_of_worker_totals():
    punches = full_day("w-1", MON) + full_day("w-1", TUE) + full_day("w-2", TUE, depart=(15, 15))
    punches.append(PunchEvent("w-3", PunchKind.ARRIVE_SITE, datetime(2025, 3, 5, 8, 0)))
    leave = [LeaveInterval("w-4", TUE, TUE, hours_credited=6.5)]

    result = aggregate(punches, leave, DateWindow(MON, WED))

    assert set(result.worker_totals) == {"w-1", "w-2", "w-3", "w-4"}
    assert result.population_total_minutes == sum(t.total_minutes for t in result.worker_totals.values())
    assert result.population_total_minutes == 510 * 2 + 405 + 0 + 390


def test_aggregation_is_deterministic():
    punches = full_day("w-1", MON) + full_day("w-2", TUE)
    leave = [LeaveInterval("w-3", MON, TUE, hours_credited=8)]
    window = DateWindow(MON, WED)

    first = aggregate(punches, leave, window)
    second = aggregate(list(reversed(punches)), list(leave), window)

    assert first == second


def test_punches_outside_window_are_dropped():
    punches = full_day("w-1", date(2025, 3, 2)) + full_day("w-1", MON) + full_day("w-1", TUE)

    result = aggregate(punches, [], DateWindow(MON, MON))

    assert [d.work_date for d in result.worker_totals["w-1"].days] == [MON]


def test_last_second_of_end_date_is_inside_window():
    punches = [
        PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(2025, 3, 3, 23, 0)),
        PunchEvent("w-1", PunchKind.DEPART_SITE, datetime(2025, 3, 3, 23, 59, 59)),
    ]

    result = aggregate(punches, [], DateWindow(MON, MON))

    assert result.worker_totals["w-1"].label == "0h 59m"


def test_duplicate_kind_keeps_earliest_timestamp():
    punches = full_day("w-1", MON)
    punches.insert(0, PunchEvent("w-1", PunchKind.DEPART_SITE, datetime(2025, 3, 3, 18, 0)))

    days = group_days(punches, DateWindow(MON, MON))

    assert days[("w-1", MON)].depart_at == datetime(2025, 3, 3, 17, 0)


def test_minutes_are_not_floored_per_day():
    punches = []
    for day in (MON, TUE):
        punches.append(PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(day.year, day.month, day.day, 8, 0, 0)))
        punches.append(PunchEvent("w-1", PunchKind.DEPART_SITE, datetime(day.year, day.month, day.day, 8, 0, 40)))

    result = aggregate(punches, [], DateWindow(MON, TUE))

    assert result.worker_totals["w-1"].label == "0h 1m"


def test_live_branch_only_with_explicit_now():
    punches = [PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(2025, 3, 3, 8, 0))]
    window = DateWindow(MON, MON)

    historical = HoursAggregator().aggregate(punches, [], window)
    live = HoursAggregator().aggregate(punches, [], window, now=datetime(2025, 3, 3, 10, 0))

    assert historical.population_total_minutes == 0
    assert live.population_total_minutes == 120


def test_reversed_window_is_rejected():
    with pytest.raises(MalformedWindow):
        DateWindow(WED, MON)


def test_malformed_leave_is_rejected():
    with pytest.raises(ValidationError):
        LeaveInterval("w-1", WED, MON, hours_credited=8)
    with pytest.raises(ValidationError):
        LeaveInterval("w-1", MON, WED, hours_credited=-1)

