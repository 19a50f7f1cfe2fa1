from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_view, current_employee_id, fail, hr_required, json_body, login_required, ok
from ..container import Container
from ..core.enums import LeaveType
from ..core.exceptions import ValidationError
from .model import leave_to_dict


def _date_or_none(value) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("Dates must use the YYYY-MM-DD format")


def register(app: Flask, container: Container) -> None:
    leave = container.leave_service

    @app.route("/api/leave", methods=["POST"], endpoint="submit_leave")
    @login_required
    @api_view
    def submit_leave():
        body = json_body()
        employee_id = current_employee_id()
        employee = container.employee_service.get(employee_id)
        created = leave.submit(
            employee_id=employee_id,
            employee_name=employee.name if employee else session.get("name", ""),
            department=employee.department if employee else "",
            leave_type=str(body.get("type") or ""),
            start_date=_date_or_none(body.get("startDate")),
            end_date=_date_or_none(body.get("endDate")),
            reason=str(body.get("reason") or ""),
        )
        return ok(201, message="Leave request submitted.", request=leave_to_dict(created))

    @app.route("/api/leave/mine", methods=["GET"], endpoint="my_leave")
    @login_required
    @api_view
    def my_leave():
        employee_id = current_employee_id()
        balances = [leave.balance(employee_id, kind.value) for kind in LeaveType]
        return ok(
            requests=[leave_to_dict(r) for r in leave.requests_for_employee(employee_id)],
            balances=[
                {"type": b.leave_type.value, "total": b.total, "used": b.used, "available": b.available}
                for b in balances
            ],
        )

    @app.route("/api/leave/pending", methods=["GET"], endpoint="pending_leave")
    @hr_required
    @api_view
    def pending_leave():
        return ok(requests=[leave_to_dict(r) for r in leave.pending()])

    @app.route("/api/leave/decisions", methods=["GET"], endpoint="leave_decisions")
    @hr_required
    @api_view
    def leave_decisions():
        decisions = leave.decisions()
        employee_id = request.args.get("employee_id")
        if employee_id:
            decisions = [d for d in decisions if d.employee_id == employee_id]
        return ok(decisions=[leave_to_dict(r) for r in decisions])

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @hr_required
    @api_view
    def approve_leave(request_id: int):
        decided = leave.approve(request_id)
        if decided is None:
            return fail("Leave request not found.", 404)
        return ok(message="Leave request approved.", request=leave_to_dict(decided))

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @hr_required
    @api_view
    def reject_leave(request_id: int):
        decided = leave.reject(request_id)
        if decided is None:
            return fail("Leave request not found.", 404)
        return ok(message="Leave request rejected.", request=leave_to_dict(decided))
