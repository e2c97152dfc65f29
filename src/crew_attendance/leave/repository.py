from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LeaveInterval


class LeaveRepository(Protocol):
    def list_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_id: Optional[str] = None,
    ) -> Sequence[LeaveInterval]:
        """Approved sick-leave intervals touching ``[start_date, end_date]``."""

        raise NotImplementedError
