from __future__ import annotations

from enum import Enum


class PunchKind(str, Enum):
    """Clock action a worker records on site.

    Values match the ``entry_type`` column of stored punches.
    """

    ARRIVE_SITE = "work_start"
    BREAK_START = "lunch_start"
    BREAK_END = "lunch_end"
    DEPART_SITE = "work_end"

    @property
    def label(self) -> str:
        return {
            PunchKind.ARRIVE_SITE: "Arrive site",
            PunchKind.BREAK_START: "Break start",
            PunchKind.BREAK_END: "Break end",
            PunchKind.DEPART_SITE: "Depart site",
        }[self]


class PunchState(str, Enum):
    """Where a worker stands within one calendar day."""

    NOT_STARTED = "NOT_STARTED"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    BACK_FROM_BREAK = "BACK_FROM_BREAK"
    DEPARTED = "DEPARTED"


class WorkerStatus(str, Enum):
    """Presence status shown next to a worker's name."""

    ACTIVE = "active"
    ON_BREAK = "on_break"
    OFF_SITE = "off_site"


class LeaveKind(str, Enum):
    VACATION = "vacation"
    ROL = "rol"
    SICK_LEAVE = "sick_leave"


class RequestStatus(str, Enum):
    """Approval state of a leave request, owned by the external workflow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
