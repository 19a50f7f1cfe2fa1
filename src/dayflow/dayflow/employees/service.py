from __future__ import annotations

import logging
import re
from dataclasses import fields, replace
from datetime import date
from typing import Callable, Optional, Sequence

from ..common.validators import require_email, require_non_empty
from ..core.exceptions import ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^EMP-(\d+)$")
_EDITABLE = {f.name for f in fields(Employee)} - {"employee_id"}


class EmployeeService:
    """Use case: maintain the employee directory."""

    def __init__(self, employees: EmployeeRepository, *, today: Callable[[], date] = date.today):
        self._employees = employees
        self._today = today

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get(self, employee_id: str) -> Optional[Employee]:
        return self._employees.get_by_id(employee_id)

    def search(self, query: str = "", *, department: Optional[str] = None) -> list[Employee]:
        q = (query or "").strip().lower()
        out = []
        for e in self._employees.list_all():
            if department and e.department != department:
                continue
            if q and q not in e.name.lower() and q not in e.employee_id.lower() and q not in e.email.lower():
                continue
            out.append(e)
        return out

    def _next_id(self, existing: Sequence[Employee]) -> str:
        highest = 0
        for e in existing:
            m = _ID_RE.match(e.employee_id)
            if m:
                highest = max(highest, int(m.group(1)))
        return f"EMP-{highest + 1:03d}"

    def add_employee(
        self,
        *,
        name: str,
        email: str,
        department: str,
        position: str,
        employee_id: Optional[str] = None,
        **extra,
    ) -> Employee:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        department = require_non_empty(department, "Department")
        position = require_non_empty(position, "Position")

        unknown = set(extra) - _EDITABLE
        if unknown:
            raise ValidationError(f"Unknown employee field(s): {', '.join(sorted(unknown))}")

        existing = list(self._employees.list_all())
        employee_id = (employee_id or "").strip() or self._next_id(existing)
        if any(e.employee_id == employee_id for e in existing):
            raise ValidationError("Employee ID is already registered.")

        if "skills" in extra:
            extra["skills"] = tuple(extra["skills"] or ())
        employee = Employee(
            employee_id=employee_id,
            name=name,
            department=department,
            position=position,
            email=email,
            join_date=extra.pop("join_date", None) or self._today().isoformat(),
            **extra,
        )
        self._employees.save_all([employee, *existing])
        logger.info("Employee %s added", employee_id)
        return employee

    def add_from_registration(
        self,
        *,
        employee_id: str,
        email: str,
        first_name: str = "",
        last_name: str = "",
        department: str = "",
        position: str = "",
    ) -> Employee:
        """Directory entry for a freshly signed-up account; salary is set later by HR."""
        existing = self._employees.get_by_id(employee_id)
        if existing:
            return existing

        employee = Employee(
            employee_id=employee_id,
            name=f"{first_name} {last_name}".strip() or email,
            department=department or "General",
            position=position or "Employee",
            email=email,
            join_date=self._today().isoformat(),
        )
        self._employees.save_all([*self._employees.list_all(), employee])
        return employee

    def update_employee(self, employee_id: str, **updates) -> Optional[Employee]:
        unknown = set(updates) - _EDITABLE
        if unknown:
            raise ValidationError(f"Unknown employee field(s): {', '.join(sorted(unknown))}")
        if "email" in updates:
            updates["email"] = require_email(updates["email"])
        if "skills" in updates:
            updates["skills"] = tuple(updates["skills"] or ())

        employees = list(self._employees.list_all())
        for i, e in enumerate(employees):
            if e.employee_id == employee_id:
                employees[i] = replace(e, **updates)
                self._employees.save_all(employees)
                return employees[i]
        return None

    def delete_employee(self, employee_id: str) -> bool:
        employees = list(self._employees.list_all())
        remaining = [e for e in employees if e.employee_id != employee_id]
        if len(remaining) == len(employees):
            return False
        self._employees.save_all(remaining)
        logger.info("Employee %s deleted", employee_id)
        return True
