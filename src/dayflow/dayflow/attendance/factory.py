from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import HALF_DAY_HOURS
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the classification strategy from elapsed hours.

    Zero hours is checked before the half-day threshold, so a check-out at the
    check-in minute (or earlier) is Absent rather than Half-day.
    """

    half_day_hours: float = HALF_DAY_HOURS

    def for_checkout(self, *, total_hours: float) -> AttendanceStrategy:
        if total_hours == 0:
            return AbsentStrategy()
        if total_hours < self.half_day_hours:
            return HalfDayStrategy()
        return PresentStrategy()
