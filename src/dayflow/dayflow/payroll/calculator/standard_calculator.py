from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.model import AttendanceRecord
from ..model import Deductions, SalaryStructure


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross is the sum of components, net is gross minus deductions."""

    def gross(self, structure: SalaryStructure) -> float:
        return structure.total

    def net(self, structure: SalaryStructure, deductions: Deductions) -> float:
        return self.gross(structure) - deductions.total

    def worked_minutes(self, record: AttendanceRecord) -> int:
        if record.total_hours is None:
            return 0
        return max(int(round(record.total_hours * 60)), 0)
