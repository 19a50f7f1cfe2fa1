from __future__ import annotations

from datetime import date, datetime

import pytest

from src.dayflow.dayflow.attendance.model import ClosedAttendance, EmployeeSnapshot, OpenAttendance
from src.dayflow.dayflow.attendance.service import AttendanceLedger, hours_worked
from src.dayflow.dayflow.attendance.storage_repository import StorageAttendanceRepository
from src.dayflow.dayflow.core.enums import AttendanceStatus


def _check_in(ledger, employee_id="EMP-001", name="Ana Lopez"):
    return ledger.check_in(employee_id, name, "Engineering", "Developer")


@pytest.mark.parametrize(
    "check_in,check_out,expected",
    [
        ("09:00", "17:30", 8.5),
        ("09:00", "09:00", 0.0),
        ("09:00", "08:00", 0.0),
        ("", "17:00", 0.0),
        ("09:00", None, 0.0),
    ],
)
def test_hours_worked(check_in, check_out, expected):
    assert hours_worked(check_in, check_out) == expected


def test_check_in_then_check_out_same_day(ledger, clock):
    _check_in(ledger)
    assert ledger.has_active_clock_in("EMP-001")

    clock.set(2025, 3, 10, 17, 45)
    closed = ledger.check_out("EMP-001")

    assert isinstance(closed, ClosedAttendance)
    assert closed.check_in_time == "09:02"
    assert closed.check_out_time == "17:45"
    assert closed.total_hours == pytest.approx(8.7167, abs=1e-3)
    assert closed.status == AttendanceStatus.PRESENT
    assert len(ledger.all_records()) == 1
    assert not ledger.has_active_clock_in("EMP-001")


def test_check_out_total_hours_matches_hours_worked(ledger, clock):
    _check_in(ledger)
    clock.set(2025, 3, 10, 12, 56)
    closed = ledger.check_out("EMP-001")
    assert closed.total_hours == hours_worked(closed.check_in_time, closed.check_out_time)


def test_check_out_without_check_in_returns_none(ledger):
    assert ledger.check_out("EMP-404") is None
    assert ledger.all_records() == []


def test_check_out_ignores_check_in_from_previous_day(ledger, clock):
    _check_in(ledger)
    clock.set(2025, 3, 11, 17, 0)
    assert ledger.check_out("EMP-001") is None


def test_second_check_in_overwrites_first(ledger, clock):
    _check_in(ledger)
    clock.set(2025, 3, 10, 10, 30)
    _check_in(ledger)

    records = ledger.records_for_employee("EMP-001")
    assert len(records) == 1
    assert isinstance(records[0], OpenAttendance)
    assert records[0].check_in_time == "10:30"


def test_check_in_after_check_out_reopens_the_day(ledger, clock):
    _check_in(ledger)
    clock.set(2025, 3, 10, 12, 0)
    ledger.check_out("EMP-001")
    clock.set(2025, 3, 10, 13, 0)
    _check_in(ledger)

    record = ledger.get_today_record("EMP-001")
    assert isinstance(record, OpenAttendance)
    assert record.total_hours is None
    assert len(ledger.all_records()) == 1


def test_check_out_at_check_in_minute_is_absent(ledger):
    _check_in(ledger)
    closed = ledger.check_out("EMP-001")
    assert closed.total_hours == 0
    assert closed.status == AttendanceStatus.ABSENT
    assert closed.notes == "No time recorded between check-in and check-out"


def test_short_day_is_half_day(ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger)
    clock.set(2025, 3, 10, 12, 54)
    closed = ledger.check_out("EMP-001")
    assert closed.total_hours == pytest.approx(3.9)
    assert closed.status == AttendanceStatus.HALF_DAY


def test_four_hours_is_present(ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger)
    clock.set(2025, 3, 10, 13, 0)
    assert ledger.check_out("EMP-001").status == AttendanceStatus.PRESENT


def test_records_are_isolated_per_employee(ledger):
    _check_in(ledger, "EMP-001")
    _check_in(ledger, "EMP-002", "Ben Okafor")

    assert len(ledger.all_records()) == 2
    assert [r.employee_id for r in ledger.records_for_employee("EMP-002")] == ["EMP-002"]


def test_snapshot_fields_and_indexes_captured_at_check_in(ledger):
    record = _check_in(ledger)
    assert record.record_id == "EMP-001-2025-03-10"
    assert record.employee.department == "Engineering"
    assert record.day.week_number == 11
    assert record.day.week_year == 2025
    assert record.day.month == 3


def test_records_by_week_is_subset_of_employee_records(ledger, clock):
    for day in (10, 12, 17):
        clock.set(2025, 3, day, 9, 0)
        _check_in(ledger)
        _check_in(ledger, "EMP-002", "Ben Okafor")

    week = ledger.records_by_week(11, 2025, "EMP-001")
    expected = [
        r for r in ledger.records_for_employee("EMP-001") if r.day.week_number == 11 and r.day.week_year == 2025
    ]
    assert week == expected
    assert [r.work_date for r in week] == [date(2025, 3, 10), date(2025, 3, 12)]
    assert len(ledger.records_by_week(11, 2025)) == 4


def test_week_query_uses_iso_week_year(ledger, clock):
    # 2024-12-30 belongs to ISO week 1 of 2025
    clock.set(2024, 12, 30, 9, 0)
    _check_in(ledger)

    assert len(ledger.records_by_week(1, 2025, "EMP-001")) == 1
    assert ledger.records_by_week(1, 2024, "EMP-001") == []
    assert len(ledger.records_by_month(12, 2024, "EMP-001")) == 1


def test_records_by_month(ledger, clock):
    clock.set(2025, 3, 31, 9, 0)
    _check_in(ledger)
    clock.set(2025, 4, 1, 9, 0)
    _check_in(ledger)

    assert [r.work_date.month for r in ledger.records_by_month(3, 2025, "EMP-001")] == [3]
    assert ledger.records_by_month(5, 2025) == []


def test_summaries_are_none_without_data(ledger):
    assert ledger.weekly_summary(11, 2025, "EMP-001") is None
    assert ledger.monthly_summary(3, 2025, "EMP-001") is None


def test_weekly_summary_counts_and_hours(ledger, clock):
    # Mon: 8h, Tue: 3h (half day), Wed: open
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger)
    clock.set(2025, 3, 10, 17, 0)
    ledger.check_out("EMP-001")
    clock.set(2025, 3, 11, 9, 0)
    _check_in(ledger)
    clock.set(2025, 3, 11, 12, 0)
    ledger.check_out("EMP-001")
    clock.set(2025, 3, 12, 9, 0)
    _check_in(ledger)

    summary = ledger.weekly_summary(11, 2025, "EMP-001")

    assert summary.total_days == 3
    assert summary.present_days == 2
    assert summary.half_days == 1
    assert summary.absent_days == 0
    assert summary.present_days + summary.absent_days + summary.half_days + summary.leave_days == summary.total_days
    assert summary.total_hours == pytest.approx(11.0)
    assert summary.average_hours == pytest.approx(5.5)
    assert summary.start_date == date(2025, 3, 10)
    assert summary.end_date == date(2025, 3, 16)
    assert summary.employee_name == "Ana Lopez"


def test_monthly_summary_includes_leave_days(ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger)
    employee = EmployeeSnapshot("EMP-001", "Ana Lopez", "Engineering", "Developer")
    ledger.record_leave_day(employee, date(2025, 3, 20), notes="Annual leave")

    summary = ledger.monthly_summary(3, 2025, "EMP-001")
    assert summary.total_days == 2
    assert summary.leave_days == 1
    assert summary.present_days == 1
    assert summary.month == 3
    assert summary.average_hours == 0.0


def test_latest_records_newest_first(ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger, "EMP-002", "Ben Okafor")
    clock.set(2025, 3, 11, 9, 0)
    _check_in(ledger, "EMP-001")
    _check_in(ledger, "EMP-003", "Cara Diaz")

    latest = ledger.latest_records()
    assert [r.employee_id for r in latest] == ["EMP-001", "EMP-003", "EMP-002"]


def test_stale_clock_ins_expire_after_ttl(ledger, clock):
    _check_in(ledger)
    clock.advance(hours=23, minutes=59)
    assert ledger.expire_stale_clock_ins() == 0

    clock.advance(minutes=1)
    assert ledger.expire_stale_clock_ins() == 1
    assert ledger.active_clock_ins() == []
    # the record itself stays
    assert len(ledger.all_records()) == 1


def test_last_check_in_marker(ledger):
    assert ledger.last_check_in("EMP-001") is None
    _check_in(ledger)
    marker = ledger.last_check_in("EMP-001")
    assert marker.check_in_time == "09:02"
    assert marker.timestamp == datetime(2025, 3, 10, 9, 2)


def test_subscribers_notified_once_per_mutation(ledger, clock):
    calls = []
    ledger.subscribe(lambda: calls.append("x"))

    _check_in(ledger)
    assert len(calls) == 1

    clock.set(2025, 3, 10, 17, 0)
    ledger.check_out("EMP-001")
    assert len(calls) == 2

    ledger.check_out("EMP-999")
    assert len(calls) == 2


def test_failing_listener_does_not_break_others(ledger):
    calls = []

    def broken():
        raise RuntimeError("boom")

    ledger.subscribe(broken)
    ledger.subscribe(lambda: calls.append(1))
    _check_in(ledger)

    assert calls == [1]


def test_unsubscribed_listener_not_called(ledger):
    calls = []
    listener = lambda: calls.append(1)  # noqa: E731
    ledger.subscribe(listener)
    ledger.unsubscribe(listener)
    _check_in(ledger)
    assert calls == []


def test_history_ui_rows(ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    _check_in(ledger)
    clock.set(2025, 3, 10, 15, 0)
    ledger.check_out("EMP-001")

    rows = ledger.get_history_ui("EMP-001")
    assert rows == [
        {
            "id": "EMP-001-2025-03-10",
            "date": "2025-03-10",
            "check_in": "09:00",
            "check_out": "15:00",
            "total_hours": 6.0,
            "status": "Present",
            "css_class": "bg-success",
        }
    ]


def test_ledgers_over_same_storage_share_state(storage, clock):
    first = AttendanceLedger(StorageAttendanceRepository(storage), clock=clock)
    second = AttendanceLedger(StorageAttendanceRepository(storage), clock=clock)

    first.check_in("EMP-001", "Ana Lopez", "Engineering", "Developer")
    assert second.has_active_clock_in("EMP-001")
