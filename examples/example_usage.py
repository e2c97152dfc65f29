"""Example: use the validator and aggregator directly (no Flask, no database)."""

from datetime import date, datetime

from crew_attendance.attendance.model import PunchEvent
from crew_attendance.attendance.validator import PunchValidator
from crew_attendance.core.enums import PunchKind
from crew_attendance.hours.aggregator import aggregate
from crew_attendance.hours.model import DateWindow
from crew_attendance.leave.model import LeaveInterval


def main():
    day = date(2025, 3, 3)
    punches = [
        PunchEvent("w-1", PunchKind.ARRIVE_SITE, datetime(2025, 3, 3, 8, 0)),
        PunchEvent("w-1", PunchKind.BREAK_START, datetime(2025, 3, 3, 12, 0)),
        PunchEvent("w-1", PunchKind.BREAK_END, datetime(2025, 3, 3, 12, 30)),
        PunchEvent("w-1", PunchKind.DEPART_SITE, datetime(2025, 3, 3, 17, 0)),
    ]
    leave = [LeaveInterval("w-2", date(2025, 3, 3), date(2025, 3, 4), hours_credited=8)]

    validator = PunchValidator()
    print("w-1 may now record:", sorted(k.value for k in validator.allowed_kinds({p.kind for p in punches})))

    result = aggregate(punches, leave, DateWindow(day, day))
    for worker_id, total in result.worker_totals.items():
        print(worker_id, total.label)
    print("population:", result.population_label)


if __name__ == "__main__":
    main()
