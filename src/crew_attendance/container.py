from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_punch_repository import MySQLPunchRepository
from .attendance.repository import PunchRepository
from .attendance.service import AttendanceService
from .attendance.validator import PunchValidator
from .core.constants import DEFAULT_REPORT_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .hours.aggregator import HoursAggregator
from .hours.service import HoursReportService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository


@dataclass(frozen=True)
class Container:
    punches_repo: PunchRepository
    leave_repo: LeaveRepository

    attendance_service: AttendanceService
    hours_report_service: HoursReportService

    default_report_days: int = DEFAULT_REPORT_DAYS
    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    punches_repo: PunchRepository,
    leave_repo: LeaveRepository,
    require_break: bool = False,
    default_report_days: int = DEFAULT_REPORT_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    aggregator = HoursAggregator()
    attendance_service = AttendanceService(
        punches_repo,
        validator=PunchValidator(require_break=require_break),
        aggregator=aggregator,
    )
    hours_report_service = HoursReportService(punches_repo, leave_repo, aggregator=aggregator)

    return Container(
        punches_repo=punches_repo,
        leave_repo=leave_repo,
        attendance_service=attendance_service,
        hours_report_service=hours_report_service,
        default_report_days=int(default_report_days),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    require_break: bool = False,
    default_report_days: int = DEFAULT_REPORT_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(
        punches_repo=MySQLPunchRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        require_break=require_break,
        default_report_days=default_report_days,
        conn=conn,
    )
