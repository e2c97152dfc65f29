from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveInterval
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    """Reads leave decided by the external approval workflow.

    Only approved sick leave counts towards worked hours.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, kinds: Sequence[LeaveKind] = (LeaveKind.SICK_LEAVE,)):
        self._conn_factory = conn_factory
        self._kinds = tuple(LeaveKind(k) for k in kinds)

    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_id: Optional[str] = None,
    ) -> Sequence[LeaveInterval]:
        placeholders = ",".join(["%s"] * len(self._kinds))
        sql = f"""
            SELECT worker_id, request_type, start_date, end_date, hours_requested
            FROM leave_requests
            WHERE status=%s
              AND request_type IN ({placeholders})
              AND start_date <= %s
              AND end_date >= %s
        """
        params: list = [RequestStatus.APPROVED.value, *[k.value for k in self._kinds], end_date, start_date]
        if worker_id is not None:
            sql += " AND worker_id=%s"
            params.append(worker_id)
        sql += " ORDER BY worker_id, start_date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                LeaveInterval(
                    worker_id=str(r["worker_id"]),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    hours_credited=float(r["hours_requested"] or 0),
                    kind=LeaveKind(r["request_type"]),
                )
                for r in fetchall(cur)
            ]
