from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, Optional

from ..attendance.model import EmployeeSnapshot
from ..attendance.service import AttendanceLedger
from ..common.validators import days_between, require_non_empty, validate_complete_date_range
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from .model import LEAVE_ALLOWANCES, LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use case: submit leave, approve/reject it, and keep the ledger in step."""

    def __init__(
        self,
        leave: LeaveRepository,
        ledger: Optional[AttendanceLedger] = None,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._leave = leave
        self._ledger = ledger
        self._today = today

    @staticmethod
    def _parse_type(value) -> LeaveType:
        try:
            return LeaveType(value)
        except ValueError:
            raise ValidationError("Invalid leave type")

    def submit(
        self,
        *,
        employee_id: str,
        employee_name: str,
        department: str,
        leave_type: str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
    ) -> LeaveRequest:
        employee_id = require_non_empty(employee_id, "Employee ID")
        kind = self._parse_type(leave_type)
        reason = require_non_empty(reason, "Reason")
        today = self._today()
        validate_complete_date_range(start_date, end_date, today=today)

        book = self._leave.load()
        ids = [r.request_id for r in book.requests + book.decisions]
        request = LeaveRequest(
            request_id=max(ids, default=0) + 1,
            employee_id=employee_id,
            employee_name=employee_name,
            department=department,
            leave_type=kind,
            start_date=start_date,
            end_date=end_date,
            days=days_between(start_date, end_date),
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_on=today,
        )
        book.requests.insert(0, request)
        self._leave.save(book)
        logger.info("Leave request %s submitted by %s", request.request_id, employee_id)
        return request

    def pending(self) -> list[LeaveRequest]:
        return self._leave.load().requests

    def decisions(self) -> list[LeaveRequest]:
        return self._leave.load().decisions

    def requests_for_employee(self, employee_id: str) -> list[LeaveRequest]:
        book = self._leave.load()
        return [r for r in book.requests + book.decisions if r.employee_id == employee_id]

    def history(self, employee_id: str) -> list[LeaveRequest]:
        return [r for r in self._leave.load().decisions if r.employee_id == employee_id]

    def approve(self, request_id: int) -> Optional[LeaveRequest]:
        decided = self._decide(request_id, LeaveStatus.APPROVED)
        if decided and self._ledger is not None:
            employee = EmployeeSnapshot(
                employee_id=decided.employee_id,
                employee_name=decided.employee_name,
                department=decided.department,
                position="",
            )
            day = decided.start_date
            while day <= decided.end_date:
                self._ledger.record_leave_day(employee, day, notes=f"{decided.leave_type.value} leave")
                day += timedelta(days=1)
        return decided

    def reject(self, request_id: int) -> Optional[LeaveRequest]:
        return self._decide(request_id, LeaveStatus.REJECTED)

    def _decide(self, request_id: int, status: LeaveStatus) -> Optional[LeaveRequest]:
        book = self._leave.load()
        request = next((r for r in book.requests if r.request_id == int(request_id)), None)
        if request is None:
            return None

        decided = replace(request, status=status, decided_on=self._today())
        book.requests = [r for r in book.requests if r.request_id != request.request_id]
        book.decisions.insert(0, decided)
        self._leave.save(book)
        logger.info("Leave request %s %s", request_id, status.value)
        return decided

    def balance(self, employee_id: str, leave_type: str, *, year: Optional[int] = None) -> LeaveBalance:
        kind = self._parse_type(leave_type)
        year = year or self._today().year
        used = sum(
            r.days
            for r in self.history(employee_id)
            if r.status == LeaveStatus.APPROVED and r.leave_type == kind and r.start_date.year == year
        )
        return LeaveBalance(leave_type=kind, total=LEAVE_ALLOWANCES.get(kind), used=used)
