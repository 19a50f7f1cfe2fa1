from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ActiveClockIn, AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance records keyed by (employee, date) plus open clock-in markers."""

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> bool:
        """Insert or replace the record for the same (employee, date)."""

        raise NotImplementedError

    def list_markers(self) -> Sequence[ActiveClockIn]:
        raise NotImplementedError

    def save_marker(self, marker: ActiveClockIn) -> bool:
        """Store ``marker``, replacing any marker for the same employee."""

        raise NotImplementedError

    def remove_marker(self, employee_id: str) -> bool:
        raise NotImplementedError

    def replace_markers(self, markers: Sequence[ActiveClockIn]) -> bool:
        raise NotImplementedError
