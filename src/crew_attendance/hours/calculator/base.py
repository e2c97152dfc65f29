from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..model import DayAggregate, DayPunches


class WorkedTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for reducing one day of punches)."""

    @abstractmethod
    def reduce_day(self, day: DayPunches, *, now: Optional[datetime] = None) -> DayAggregate:
        raise NotImplementedError
