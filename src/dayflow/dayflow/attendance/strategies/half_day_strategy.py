from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Short day, below the half-day threshold."""

    def decide_checkout(self, *, total_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)
