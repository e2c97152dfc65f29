from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PunchEvent


class PunchRepository(Protocol):
    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        worker_id: Optional[str] = None,
    ) -> Sequence[PunchEvent]:
        """Punches whose calendar date falls in ``[start_date, end_date]``, ascending by timestamp."""

        raise NotImplementedError

    def list_for_worker_on(self, worker_id: str, work_date: date) -> Sequence[PunchEvent]:
        raise NotImplementedError

    def create(self, punch: PunchEvent) -> int:
        """Persist an already-validated punch.

        Implementations must reject a second punch of the same kind for the
        same worker and day by raising InvalidTransition.
        """

        raise NotImplementedError
