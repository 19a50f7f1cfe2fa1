from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    EMPLOYEE = "employee"
    HR = "hr"


class AttendanceStatus(str, Enum):
    """Day classification stored on every attendance record."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "Half-day"
    LEAVE = "Leave"


class LeaveStatus(str, Enum):
    """Leave approval workflow states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    PERSONAL = "Personal"
    UNPAID = "Unpaid"
