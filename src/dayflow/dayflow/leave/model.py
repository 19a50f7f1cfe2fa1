from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import LeaveStatus, LeaveType

# Yearly allowance in days; Unpaid leave has no cap.
LEAVE_ALLOWANCES = {
    LeaveType.ANNUAL: 20,
    LeaveType.SICK: 10,
    LeaveType.PERSONAL: 5,
}


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: str
    employee_name: str
    department: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus
    applied_on: date
    decided_on: Optional[date] = None


@dataclass(frozen=True)
class LeaveBalance:
    leave_type: LeaveType
    total: Optional[int]
    used: int

    @property
    def available(self) -> Optional[int]:
        return None if self.total is None else max(self.total - self.used, 0)


@dataclass
class LeaveBook:
    """Pending requests plus decided ones, newest first."""

    requests: list[LeaveRequest] = field(default_factory=list)
    decisions: list[LeaveRequest] = field(default_factory=list)


def leave_to_dict(r: LeaveRequest) -> dict:
    return {
        "id": r.request_id,
        "employeeId": r.employee_id,
        "employee": r.employee_name,
        "department": r.department,
        "type": r.leave_type.value,
        "startDate": r.start_date.isoformat(),
        "endDate": r.end_date.isoformat(),
        "days": r.days,
        "reason": r.reason,
        "status": r.status.value,
        "appliedOn": r.applied_on.isoformat(),
        "decidedOn": r.decided_on.isoformat() if r.decided_on else None,
    }


def leave_from_dict(data: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(data["id"]),
        employee_id=str(data["employeeId"]),
        employee_name=data.get("employee") or "",
        department=data.get("department") or "",
        leave_type=LeaveType(data["type"]),
        start_date=parse_iso_date(data["startDate"]),
        end_date=parse_iso_date(data["endDate"]),
        days=int(data["days"]),
        reason=data.get("reason") or "",
        status=LeaveStatus(data["status"]),
        applied_on=parse_iso_date(data["appliedOn"]),
        decided_on=parse_iso_date(data["decidedOn"]) if data.get("decidedOn") else None,
    )
