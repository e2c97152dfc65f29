from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PunchKind


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one clock action recorded by a worker."""

    worker_id: str
    kind: PunchKind
    timestamp: datetime
    worksite_ref: Optional[str] = None
    edited: bool = False
    note: Optional[str] = None
    punch_id: Optional[int] = None

    @property
    def work_date(self) -> date:
        return self.timestamp.date()
