from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Check-out netting zero elapsed time counts as absent."""

    def decide_checkout(self, *, total_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT, note="No time recorded between check-in and check-out")
