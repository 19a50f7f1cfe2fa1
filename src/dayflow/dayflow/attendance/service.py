from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import format_hhmm, hhmm_to_minutes, now_local, week_dates
from ..common.events import ChangeNotifier, Listener
from ..core.constants import CLOCK_IN_EXPIRY_HOURS
from ..core.enums import AttendanceStatus
from .factory import AttendanceStrategyFactory
from .model import (
    ActiveClockIn,
    AttendanceRecord,
    AttendanceSummary,
    ClosedAttendance,
    DayIndex,
    EmployeeSnapshot,
    LeaveAttendance,
    OpenAttendance,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def hours_worked(check_in_time: Optional[str], check_out_time: Optional[str]) -> float:
    """Elapsed hours between two ``HH:MM`` times of the same day, never negative.

    A check-out that falls on the next calendar day is not supported and
    clamps to zero.
    """
    if not check_in_time or not check_out_time:
        return 0.0
    minutes = hhmm_to_minutes(check_out_time) - hhmm_to_minutes(check_in_time)
    return max(0.0, minutes / 60)


class AttendanceLedger:
    """Source of truth for daily attendance records and their aggregates.

    Every mutation goes through the injected repository and, once stored,
    notifies subscribers so that independent views can refresh.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        clock: Callable[[], datetime] = now_local,
        marker_ttl_hours: int = CLOCK_IN_EXPIRY_HOURS,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock
        self._marker_ttl = timedelta(hours=int(marker_ttl_hours))
        self._notifier = ChangeNotifier("attendance")

    # -- change notification -------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._notifier.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._notifier.unsubscribe(listener)

    def _saved(self, ok: bool) -> bool:
        if ok:
            self._notifier.notify()
        return ok

    # -- writes --------------------------------------------------------------

    def check_in(self, employee_id: str, employee_name: str, department: str, position: str) -> AttendanceRecord:
        now = self._clock()
        today = now.date()
        time_s = format_hhmm(now)
        employee = EmployeeSnapshot(
            employee_id=employee_id,
            employee_name=employee_name,
            department=department,
            position=position,
        )

        previous = self._attendance.get_for_employee_and_date(employee_id, today)
        if previous is not None and previous.check_in_time:
            logger.info(
                "Check-in for %s on %s replaces earlier check-in at %s",
                employee_id,
                today.isoformat(),
                previous.check_in_time,
            )

        record = OpenAttendance(employee=employee, day=DayIndex.for_date(today), check_in_time=time_s)
        marker = ActiveClockIn(employee=employee, work_date=today, check_in_time=time_s, timestamp=now)
        self._saved(self._attendance.save(record) and self._attendance.save_marker(marker))
        logger.info("Active clock-in saved for employee %s at %s", employee_id, time_s)
        return record

    def check_out(self, employee_id: str) -> Optional[ClosedAttendance]:
        now = self._clock()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record is None or not record.check_in_time:
            return None

        time_s = format_hhmm(now)
        total = hours_worked(record.check_in_time, time_s)
        decision = self._factory.for_checkout(total_hours=total).decide_checkout(total_hours=total)

        closed = ClosedAttendance(
            employee=record.employee,
            day=record.day,
            check_in_time=record.check_in_time,
            check_out_time=time_s,
            total_hours=total,
            status=decision.status,
            notes=decision.note or record.notes,
        )
        self._saved(self._attendance.save(closed) and self._attendance.remove_marker(employee_id))
        logger.info("Employee %s checked out at %s (%.2f h, %s)", employee_id, time_s, total, decision.status.value)
        return closed

    def record_leave_day(self, employee: EmployeeSnapshot, work_date: date, *, notes: Optional[str] = None) -> AttendanceRecord:
        record = LeaveAttendance(employee=employee, day=DayIndex.for_date(work_date), notes=notes)
        self._saved(self._attendance.save(record))
        return record

    # -- reads ---------------------------------------------------------------

    @staticmethod
    def hours_worked(check_in_time: Optional[str], check_out_time: Optional[str]) -> float:
        return hours_worked(check_in_time, check_out_time)

    def today(self) -> date:
        return self._clock().date()

    def all_records(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all()

    def get_today_record(self, employee_id: str) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, self._clock().date())

    def records_for_employee(self, employee_id: str) -> list[AttendanceRecord]:
        return [r for r in self._attendance.list_all() if r.employee_id == employee_id]

    def records_by_week(self, week_number: int, year: int, employee_id: Optional[str] = None) -> list[AttendanceRecord]:
        return [
            r
            for r in self._attendance.list_all()
            if r.day.week_number == week_number
            and r.day.week_year == year
            and (not employee_id or r.employee_id == employee_id)
        ]

    def records_by_month(self, month: int, year: int, employee_id: Optional[str] = None) -> list[AttendanceRecord]:
        return [
            r
            for r in self._attendance.list_all()
            if r.day.month == month and r.day.year == year and (not employee_id or r.employee_id == employee_id)
        ]

    def records_by_date_range(self, start: date, end: date) -> list[AttendanceRecord]:
        return [r for r in self._attendance.list_all() if start <= r.work_date <= end]

    def latest_records(self) -> list[AttendanceRecord]:
        """Newest record per employee, newest date first then by name."""
        latest: dict[str, AttendanceRecord] = {}
        for r in self._attendance.list_all():
            current = latest.get(r.employee_id)
            if current is None or _is_newer(r, current):
                latest[r.employee_id] = r

        out = sorted(latest.values(), key=lambda r: r.employee_name)
        out.sort(key=lambda r: r.work_date, reverse=True)
        return out

    # -- summaries -----------------------------------------------------------

    def weekly_summary(self, week_number: int, year: int, employee_id: str) -> Optional[AttendanceSummary]:
        records = self.records_by_week(week_number, year, employee_id)
        if not records:
            return None
        start, end = week_dates(week_number, year)
        return _summarize(
            records,
            employee_id=employee_id,
            year=year,
            week_number=week_number,
            start_date=start,
            end_date=end,
        )

    def monthly_summary(self, month: int, year: int, employee_id: str) -> Optional[AttendanceSummary]:
        records = self.records_by_month(month, year, employee_id)
        if not records:
            return None
        return _summarize(records, employee_id=employee_id, year=year, month=month)

    # -- clock-in markers ----------------------------------------------------

    def active_clock_ins(self) -> Sequence[ActiveClockIn]:
        return self._attendance.list_markers()

    def has_active_clock_in(self, employee_id: str) -> bool:
        return any(m.employee_id == employee_id for m in self._attendance.list_markers())

    def last_check_in(self, employee_id: str) -> Optional[ActiveClockIn]:
        for m in self._attendance.list_markers():
            if m.employee_id == employee_id:
                return m
        return None

    def expire_stale_clock_ins(self) -> int:
        """Drop markers created ``marker_ttl_hours`` or more ago; returns how many."""
        now = self._clock()
        markers = self._attendance.list_markers()
        valid = [m for m in markers if now - m.timestamp < self._marker_ttl]
        removed = len(markers) - len(valid)
        if removed:
            self._saved(self._attendance.replace_markers(valid))
            logger.info("Cleaned up %d expired clock-in(s)", removed)
        return removed

    # -- presentation --------------------------------------------------------

    def get_history_ui(self, employee_id: str, *, limit: int = 15) -> list[dict]:
        rows = sorted(self.records_for_employee(employee_id), key=lambda r: r.work_date, reverse=True)
        return [self._to_ui(r) for r in rows[:limit]]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        css = {
            AttendanceStatus.PRESENT: "bg-success",
            AttendanceStatus.HALF_DAY: "bg-warning text-dark",
            AttendanceStatus.ABSENT: "bg-danger",
            AttendanceStatus.LEAVE: "bg-info",
        }.get(r.status, "bg-secondary")

        return {
            "id": r.record_id,
            "date": r.work_date.isoformat(),
            "check_in": r.check_in_time or "-",
            "check_out": r.check_out_time or "-",
            "total_hours": round(r.total_hours, 2) if r.total_hours is not None else None,
            "status": r.status.value,
            "css_class": css,
        }


def _is_newer(candidate: AttendanceRecord, existing: AttendanceRecord) -> bool:
    if candidate.work_date != existing.work_date:
        return candidate.work_date > existing.work_date
    if candidate.check_in_time and existing.check_in_time:
        return candidate.check_in_time > existing.check_in_time
    return bool(candidate.check_in_time)


def _summarize(records: Iterable[AttendanceRecord], *, employee_id: str, year: int, **period) -> AttendanceSummary:
    records = list(records)
    counts = {status: 0 for status in AttendanceStatus}
    hours = []
    for r in records:
        counts[r.status] += 1
        if r.total_hours is not None:
            hours.append(r.total_hours)

    total_hours = sum(hours)
    return AttendanceSummary(
        employee_id=employee_id,
        employee_name=records[0].employee_name,
        year=year,
        total_days=len(records),
        present_days=counts[AttendanceStatus.PRESENT],
        absent_days=counts[AttendanceStatus.ABSENT],
        half_days=counts[AttendanceStatus.HALF_DAY],
        leave_days=counts[AttendanceStatus.LEAVE],
        total_hours=total_hours,
        average_hours=total_hours / len(hours) if hours else 0.0,
        **period,
    )
