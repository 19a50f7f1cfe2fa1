from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord
from ..model import Deductions, SalaryStructure


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def gross(self, structure: SalaryStructure) -> float:
        raise NotImplementedError

    @abstractmethod
    def net(self, structure: SalaryStructure, deductions: Deductions) -> float:
        raise NotImplementedError

    @abstractmethod
    def worked_minutes(self, record: AttendanceRecord) -> int:
        raise NotImplementedError
