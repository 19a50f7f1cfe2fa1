from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_employee_id, fail, hr_required, is_hr, json_body, login_required, ok
from ..container import Container
from .model import FIELD_TO_KEY, employee_to_dict

_KEY_TO_FIELD = {key: attr for attr, key in FIELD_TO_KEY.items()}


def _fields_from_json(body: dict) -> dict:
    """camelCase request keys to Employee field names; unknown keys pass through for validation."""
    return {_KEY_TO_FIELD.get(key, key): value for key, value in body.items()}


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @hr_required
    @api_view
    def list_employees():
        found = employees.search(request.args.get("q", ""), department=request.args.get("department") or None)
        return ok(employees=[employee_to_dict(e) for e in found])

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @login_required
    @api_view
    def get_employee(employee_id: str):
        if not is_hr() and employee_id != current_employee_id():
            return fail("You do not have permission to perform this action.", 403)
        employee = employees.get(employee_id)
        if employee is None:
            return fail("Employee not found.", 404)
        return ok(employee=employee_to_dict(employee))

    @app.route("/api/employees", methods=["POST"], endpoint="add_employee")
    @hr_required
    @api_view
    def add_employee():
        data = _fields_from_json(json_body())
        employee = employees.add_employee(
            name=data.pop("name", ""),
            email=data.pop("email", ""),
            department=data.pop("department", ""),
            position=data.pop("position", ""),
            **data,
        )
        return ok(201, message="Employee added successfully.", employee=employee_to_dict(employee))

    @app.route("/api/employees/<employee_id>", methods=["PUT", "PATCH"], endpoint="update_employee")
    @hr_required
    @api_view
    def update_employee(employee_id: str):
        data = _fields_from_json(json_body())
        data.pop("employee_id", None)
        employee = employees.update_employee(employee_id, **data)
        if employee is None:
            return fail("Employee not found.", 404)
        return ok(message="Employee updated successfully.", employee=employee_to_dict(employee))

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @hr_required
    @api_view
    def delete_employee(employee_id: str):
        if not employees.delete_employee(employee_id):
            return fail("Employee not found.", 404)
        return ok(message="Employee deleted.")
