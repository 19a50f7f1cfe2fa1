from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import iso_week_number, iso_week_year, parse_iso_date
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Descriptive employee fields copied onto a record at write time.

    They are never re-synced if the employee profile changes later.
    """

    employee_id: str
    employee_name: str
    department: str
    position: str


@dataclass(frozen=True)
class DayIndex:
    """Materialized indexing fields, computed once when a record is created."""

    work_date: date
    week_number: int
    week_year: int
    month: int
    year: int

    @classmethod
    def for_date(cls, work_date: date) -> "DayIndex":
        return cls(
            work_date=work_date,
            week_number=iso_week_number(work_date),
            week_year=iso_week_year(work_date),
            month=work_date.month,
            year=work_date.year,
        )


@dataclass(frozen=True)
class _RecordBase:
    employee: EmployeeSnapshot
    day: DayIndex

    @property
    def record_id(self) -> str:
        return f"{self.employee.employee_id}-{self.day.work_date.isoformat()}"

    @property
    def employee_id(self) -> str:
        return self.employee.employee_id

    @property
    def employee_name(self) -> str:
        return self.employee.employee_name

    @property
    def work_date(self) -> date:
        return self.day.work_date


@dataclass(frozen=True)
class OpenAttendance(_RecordBase):
    """Checked in, not yet checked out."""

    check_in_time: str
    notes: Optional[str] = None

    @property
    def status(self) -> AttendanceStatus:
        return AttendanceStatus.PRESENT

    @property
    def check_out_time(self) -> None:
        return None

    @property
    def total_hours(self) -> None:
        return None


@dataclass(frozen=True)
class ClosedAttendance(_RecordBase):
    """Checked out: hours and status are final."""

    check_in_time: str
    check_out_time: str
    total_hours: float
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class LeaveAttendance(_RecordBase):
    """A day covered by approved leave."""

    notes: Optional[str] = None

    @property
    def status(self) -> AttendanceStatus:
        return AttendanceStatus.LEAVE

    @property
    def check_in_time(self) -> None:
        return None

    @property
    def check_out_time(self) -> None:
        return None

    @property
    def total_hours(self) -> None:
        return None


AttendanceRecord = Union[OpenAttendance, ClosedAttendance, LeaveAttendance]


@dataclass(frozen=True)
class ActiveClockIn:
    """Open clock-in marker; survives reloads until check-out or expiry."""

    employee: EmployeeSnapshot
    work_date: date
    check_in_time: str
    timestamp: datetime

    @property
    def employee_id(self) -> str:
        return self.employee.employee_id


@dataclass(frozen=True)
class AttendanceSummary:
    """Aggregate over a week or month of one employee's records."""

    employee_id: str
    employee_name: str
    year: int
    total_days: int
    present_days: int
    absent_days: int
    half_days: int
    leave_days: int
    total_hours: float
    average_hours: float
    week_number: Optional[int] = None
    month: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


def record_to_dict(record: AttendanceRecord) -> dict:
    kind = {OpenAttendance: "open", ClosedAttendance: "closed", LeaveAttendance: "leave"}[type(record)]
    return {
        "id": record.record_id,
        "kind": kind,
        "employeeId": record.employee.employee_id,
        "employeeName": record.employee.employee_name,
        "department": record.employee.department,
        "position": record.employee.position,
        "date": record.day.work_date.isoformat(),
        "checkInTime": record.check_in_time,
        "checkOutTime": record.check_out_time,
        "totalHours": record.total_hours,
        "status": record.status.value,
        "notes": record.notes,
        "weekNumber": record.day.week_number,
        "weekYear": record.day.week_year,
        "month": record.day.month,
        "year": record.day.year,
    }


def record_from_dict(data: dict) -> AttendanceRecord:
    employee = EmployeeSnapshot(
        employee_id=str(data["employeeId"]),
        employee_name=data.get("employeeName") or "",
        department=data.get("department") or "",
        position=data.get("position") or "",
    )
    work_date = parse_iso_date(data["date"])
    day = DayIndex(
        work_date=work_date,
        week_number=int(data.get("weekNumber") or iso_week_number(work_date)),
        week_year=int(data.get("weekYear") or iso_week_year(work_date)),
        month=int(data.get("month") or work_date.month),
        year=int(data.get("year") or work_date.year),
    )
    notes = data.get("notes")

    kind = data.get("kind")
    if kind is None:
        # Records written without a kind tag: infer from which fields are set.
        status = data.get("status")
        if data.get("checkOutTime"):
            kind = "closed"
        elif status == AttendanceStatus.LEAVE.value:
            kind = "leave"
        elif data.get("checkInTime"):
            kind = "open"
        elif status:
            # a finished day without times, e.g. marked Absent
            kind = "closed"
        else:
            raise ValueError("Attendance record has neither times nor status")

    if kind == "open":
        return OpenAttendance(employee=employee, day=day, check_in_time=data["checkInTime"], notes=notes)
    if kind == "closed":
        return ClosedAttendance(
            employee=employee,
            day=day,
            check_in_time=data.get("checkInTime") or "",
            check_out_time=data.get("checkOutTime") or "",
            total_hours=float(data.get("totalHours") or 0),
            status=AttendanceStatus(data["status"]),
            notes=notes,
        )
    return LeaveAttendance(employee=employee, day=day, notes=notes)


def marker_to_dict(marker: ActiveClockIn) -> dict:
    return {
        "employeeId": marker.employee.employee_id,
        "employeeName": marker.employee.employee_name,
        "department": marker.employee.department,
        "position": marker.employee.position,
        "date": marker.work_date.isoformat(),
        "checkInTime": marker.check_in_time,
        "timestamp": marker.timestamp.isoformat(),
    }


def marker_from_dict(data: dict) -> ActiveClockIn:
    timestamp = datetime.fromisoformat(str(data["timestamp"]).replace("Z", "+00:00"))
    if timestamp.tzinfo is not None:
        # clock-ins are compared against naive local time
        timestamp = timestamp.astimezone().replace(tzinfo=None)
    return ActiveClockIn(
        employee=EmployeeSnapshot(
            employee_id=str(data["employeeId"]),
            employee_name=data.get("employeeName") or "",
            department=data.get("department") or "",
            position=data.get("position") or "",
        ),
        work_date=parse_iso_date(data["date"]),
        check_in_time=data["checkInTime"],
        timestamp=timestamp,
    )
