from __future__ import annotations

from dataclasses import asdict, fields
from datetime import date

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_view, current_employee_id, fail, hr_required, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Deductions, SalaryStructure


def _jsonable(obj) -> dict:
    data = asdict(obj)
    for key, value in data.items():
        if isinstance(value, date):
            data[key] = value.isoformat()
    return data


def _amounts(cls, body: dict):
    """Build a SalaryStructure/Deductions from a JSON body, rejecting non-numbers."""
    values = {}
    for f in fields(cls):
        raw = body.get(f.name, 0)
        try:
            values[f.name] = float(raw or 0)
        except (TypeError, ValueError):
            raise ValidationError(f"{f.name.replace('_', ' ').capitalize()} must be a non-negative number")
    return cls(**values)


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="all_payroll")
    @hr_required
    @api_view
    def all_payroll():
        return ok(payroll=[_jsonable(r) for r in payroll.all_employee_payroll()])

    @app.route("/api/payroll/me", methods=["GET"], endpoint="my_payroll")
    @login_required
    @api_view
    def my_payroll():
        record = payroll.employee_payroll(current_employee_id())
        if record is None:
            return fail("Employee not found.", 404)
        return ok(payroll=_jsonable(record))

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @hr_required
    @api_view
    def payroll_summary():
        return ok(
            summary=_jsonable(payroll.summary()),
            departments=[_jsonable(d) for d in payroll.department_breakdown()],
        )

    @app.route("/api/payroll/report", methods=["GET"], endpoint="payroll_report")
    @hr_required
    @api_view
    def payroll_report():
        try:
            start = parse_iso_date(request.args["start"])
            end = parse_iso_date(request.args["end"])
        except (KeyError, ValueError):
            raise ValidationError("start and end dates (YYYY-MM-DD) are required")
        if end < start:
            raise ValidationError("End date cannot be before start date")

        data = payroll.build_attendance_report(start=start, end=end, employee_id=request.args.get("employee_id"))
        return ok(rows=data.rows, summary=data.summary)

    @app.route("/api/payroll/<employee_id>", methods=["GET"], endpoint="employee_payroll")
    @hr_required
    @api_view
    def employee_payroll(employee_id: str):
        record = payroll.employee_payroll(employee_id)
        if record is None:
            return fail("Employee not found.", 404)
        return ok(
            payroll=_jsonable(record),
            history=[_jsonable(c) for c in payroll.salary_history(employee_id)],
        )

    @app.route("/api/payroll/<employee_id>/salary-structure", methods=["PUT"], endpoint="update_salary_structure")
    @hr_required
    @api_view
    def update_salary_structure(employee_id: str):
        structure = _amounts(SalaryStructure, json_body())
        if not payroll.update_salary_structure(employee_id, structure, updated_by=session.get("name") or "Admin"):
            return fail("Employee not found.", 404)
        return ok(message="Salary structure updated.", payroll=_jsonable(payroll.employee_payroll(employee_id)))

    @app.route("/api/payroll/<employee_id>/deductions", methods=["PUT"], endpoint="update_deductions")
    @hr_required
    @api_view
    def update_deductions(employee_id: str):
        deductions = _amounts(Deductions, json_body())
        if not payroll.update_deductions(employee_id, deductions):
            return fail("Employee not found.", 404)
        return ok(message="Deductions updated.", payroll=_jsonable(payroll.employee_payroll(employee_id)))

    @app.route("/api/payroll/<employee_id>/process", methods=["POST"], endpoint="process_payroll")
    @hr_required
    @api_view
    def process_payroll(employee_id: str):
        if not payroll.mark_processed(employee_id, processed_by=session.get("name") or "System"):
            return fail("No salary structure configured for this employee.", 400)
        return ok(message="Payroll processed.", payroll=_jsonable(payroll.employee_payroll(employee_id)))
