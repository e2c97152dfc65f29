from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PunchKind
from ..core.exceptions import InvalidTransition
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, is_duplicate_key
from .model import PunchEvent
from .repository import PunchRepository

_COLUMNS = "id, worker_id, worksite_id, entry_type, `timestamp`, notes, edited_at"


def _to_punch(r: dict) -> PunchEvent:
    return PunchEvent(
        punch_id=int(r["id"]),
        worker_id=str(r["worker_id"]),
        kind=PunchKind(r["entry_type"]),
        timestamp=r["timestamp"],
        worksite_ref=r.get("worksite_id"),
        edited=r.get("edited_at") is not None,
        note=r.get("notes"),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_id: Optional[str] = None,
    ) -> Sequence[PunchEvent]:
        sql = f"SELECT {_COLUMNS} FROM time_entries WHERE work_date BETWEEN %s AND %s"
        params: list = [start_date, end_date]
        if worker_id is not None:
            sql += " AND worker_id=%s"
            params.append(worker_id)
        sql += " ORDER BY `timestamp` ASC, id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_punch(r) for r in fetchall(cur)]

    def list_for_worker_on(self, worker_id: str, work_date: date) -> Sequence[PunchEvent]:
        return self.list_between(start_date=work_date, end_date=work_date, worker_id=worker_id)

    def create(self, punch: PunchEvent) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(worker_id, worksite_id, entry_type, `timestamp`, work_date, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        punch.worker_id,
                        punch.worksite_ref,
                        punch.kind.value,
                        punch.timestamp,
                        punch.work_date,
                        punch.note,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            raise InvalidTransition(
                f"{punch.kind.label} already recorded on {punch.work_date.isoformat()}",
                worker_id=punch.worker_id,
                kind=punch.kind,
            ) from e
