from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    def decide_checkout(self, *, total_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
