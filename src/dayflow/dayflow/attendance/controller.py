from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from flask import Flask, request, session

from ..common.datetime_utils import iso_week_number, iso_week_year, parse_iso_date
from ..common.web import api_view, current_employee_id, fail, hr_required, is_hr, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceSummary, marker_to_dict, record_to_dict


def _summary_to_dict(summary: Optional[AttendanceSummary]) -> Optional[dict]:
    if summary is None:
        return None
    data = asdict(summary)
    for key in ("start_date", "end_date"):
        if data[key] is not None:
            data[key] = data[key].isoformat()
    return data


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger

    def _target_employee() -> str:
        """Employees only see their own records; HR may pass ?employee_id=."""
        requested = request.args.get("employee_id")
        if requested and is_hr():
            return requested
        return current_employee_id()

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    @api_view
    def attendance_today():
        ledger.expire_stale_clock_ins()
        employee_id = current_employee_id()
        record = ledger.get_today_record(employee_id)
        marker = ledger.last_check_in(employee_id)
        return ok(
            record=record_to_dict(record) if record else None,
            clocked_in=ledger.has_active_clock_in(employee_id),
            last_check_in=marker_to_dict(marker) if marker else None,
        )

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    @api_view
    def attendance_check_in():
        employee_id = current_employee_id()
        employee = container.employee_service.get(employee_id)
        record = ledger.check_in(
            employee_id,
            employee.name if employee else session.get("name", ""),
            employee.department if employee else "",
            employee.position if employee else "",
        )
        return ok(message="Checked in successfully.", record=record_to_dict(record))

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    @api_view
    def attendance_check_out():
        record = ledger.check_out(current_employee_id())
        if record is None:
            return fail("No check-in found for today.", 400)
        return ok(message="Checked out successfully.", record=record_to_dict(record))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @api_view
    def attendance_history():
        ledger.expire_stale_clock_ins()
        limit = _int_arg("limit", 15)
        return ok(history=ledger.get_history_ui(_target_employee(), limit=limit))

    @app.route("/api/attendance/week", methods=["GET"], endpoint="attendance_week")
    @login_required
    @api_view
    def attendance_week():
        today = ledger.today()
        week = _int_arg("week", iso_week_number(today))
        year = _int_arg("year", iso_week_year(today))
        employee_id = _target_employee()
        records = ledger.records_by_week(week, year, employee_id)
        return ok(
            week=week,
            year=year,
            records=[record_to_dict(r) for r in records],
            summary=_summary_to_dict(ledger.weekly_summary(week, year, employee_id)),
        )

    @app.route("/api/attendance/month", methods=["GET"], endpoint="attendance_month")
    @login_required
    @api_view
    def attendance_month():
        today = ledger.today()
        month = _int_arg("month", today.month)
        year = _int_arg("year", today.year)
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        employee_id = _target_employee()
        records = ledger.records_by_month(month, year, employee_id)
        return ok(
            month=month,
            year=year,
            records=[record_to_dict(r) for r in records],
            summary=_summary_to_dict(ledger.monthly_summary(month, year, employee_id)),
        )

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @hr_required
    @api_view
    def attendance_records():
        start_s, end_s = request.args.get("start"), request.args.get("end")
        if start_s and end_s:
            try:
                start, end = parse_iso_date(start_s), parse_iso_date(end_s)
            except ValueError:
                raise ValidationError("Dates must use the YYYY-MM-DD format")
            records = ledger.records_by_date_range(start, end)
        else:
            records = ledger.all_records()
        return ok(records=[record_to_dict(r) for r in records])

    @app.route("/api/attendance/latest", methods=["GET"], endpoint="attendance_latest")
    @hr_required
    @api_view
    def attendance_latest():
        ledger.expire_stale_clock_ins()
        return ok(records=[record_to_dict(r) for r in ledger.latest_records()])

    @app.route("/api/attendance/active", methods=["GET"], endpoint="attendance_active")
    @hr_required
    @api_view
    def attendance_active():
        ledger.expire_stale_clock_ins()
        return ok(active=[marker_to_dict(m) for m in ledger.active_clock_ins()])
