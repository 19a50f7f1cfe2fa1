from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import (
    Deductions,
    DepartmentPayroll,
    PayrollEntry,
    PayrollRecord,
    PayrollSummary,
    SalaryStructure,
    SalaryStructureChange,
)
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

STATUS_NA = "NA"
STATUS_UPDATED = "updated"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _require_amounts(obj) -> None:
    for f in fields(obj):
        value = getattr(obj, f.name)
        if not isinstance(value, (int, float)) or value < 0:
            raise ValidationError(f"{f.name.replace('_', ' ').capitalize()} must be a non-negative number")


def _fmt_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class PayrollService:
    """Use case: salary structures, payroll read-models and hours reports."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeService,
        ledger: Optional[AttendanceLedger] = None,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._ledger = ledger
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def _to_record(self, employee: Employee, entry: Optional[PayrollEntry]) -> PayrollRecord:
        if entry is None:
            structure, deductions = SalaryStructure(), Deductions()
            return PayrollRecord(
                employee_id=employee.employee_id,
                employee_name=employee.name,
                email=employee.email,
                department=employee.department,
                position=employee.position,
                hire_date=employee.join_date,
                salary_structure=structure,
                deductions=deductions,
                gross=0,
                net=0,
                status=STATUS_NA,
            )

        return PayrollRecord(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            email=employee.email,
            department=employee.department,
            position=employee.position,
            hire_date=employee.join_date,
            salary_structure=entry.salary_structure,
            deductions=entry.deductions,
            gross=self._calculator.gross(entry.salary_structure),
            net=self._calculator.net(entry.salary_structure, entry.deductions),
            status=entry.status,
            payment_date=entry.payment_date,
            processed_by=entry.processed_by,
            last_updated=entry.last_updated,
        )

    def all_employee_payroll(self) -> list[PayrollRecord]:
        entries = {e.employee_id: e for e in self._payroll.list_entries()}
        return [self._to_record(emp, entries.get(emp.employee_id)) for emp in self._employees.list_employees()]

    def employee_payroll(self, employee_id: str) -> Optional[PayrollRecord]:
        employee = self._employees.get(employee_id)
        if not employee:
            return None
        return self._to_record(employee, self._payroll.get_entry(employee_id))

    def update_salary_structure(self, employee_id: str, structure: SalaryStructure, *, updated_by: str = "Admin") -> bool:
        if not self._employees.get(employee_id):
            return False
        _require_amounts(structure)

        now = self._clock()
        current = self._payroll.get_entry(employee_id)
        entry = PayrollEntry(
            employee_id=employee_id,
            salary_structure=structure,
            deductions=current.deductions if current else Deductions(),
            status=STATUS_UPDATED,
            payment_date=current.payment_date if current else None,
            processed_by=updated_by,
            last_updated=now.isoformat(),
        )
        if not self._payroll.save_entry(entry):
            return False

        self._payroll.save_structure_change(
            SalaryStructureChange(
                employee_id=employee_id,
                salary_structure=structure,
                total_gross=self._calculator.gross(structure),
                effective_date=now.date(),
                updated_by=updated_by,
            )
        )
        logger.info("Salary structure updated for %s by %s", employee_id, updated_by)
        return True

    def update_deductions(self, employee_id: str, deductions: Deductions) -> bool:
        if not self._employees.get(employee_id):
            return False
        _require_amounts(deductions)

        current = self._payroll.get_entry(employee_id)
        entry = PayrollEntry(
            employee_id=employee_id,
            salary_structure=current.salary_structure if current else SalaryStructure(),
            deductions=deductions,
            status=STATUS_UPDATED,
            payment_date=current.payment_date if current else None,
            processed_by=current.processed_by if current else "",
            last_updated=self._clock().isoformat(),
        )
        return self._payroll.save_entry(entry)

    def mark_processed(self, employee_id: str, *, processed_by: str = "System", payment_date: Optional[date] = None) -> bool:
        current = self._payroll.get_entry(employee_id)
        if current is None:
            return False
        now = self._clock()
        return self._payroll.save_entry(
            replace(
                current,
                status="processed",
                processed_by=processed_by,
                payment_date=payment_date or now.date(),
                last_updated=now.isoformat(),
            )
        )

    def salary_history(self, employee_id: str) -> list[SalaryStructureChange]:
        return [c for c in self._payroll.list_structure_changes() if c.employee_id == employee_id]

    def _configured_records(self) -> list[PayrollRecord]:
        return [r for r in self.all_employee_payroll() if r.status != STATUS_NA]

    def summary(self) -> PayrollSummary:
        records = self._configured_records()
        return PayrollSummary(
            total_employees=len(records),
            total_gross_payroll=sum(r.gross for r in records),
            total_deductions=sum(r.deductions.total for r in records),
            total_net_payroll=sum(r.net for r in records),
            processing_date=self._clock().date(),
        )

    def department_breakdown(self) -> list[DepartmentPayroll]:
        by_dept: dict[str, dict] = {}
        for r in self._configured_records():
            d = by_dept.setdefault(r.department or "Unknown", {"employees": 0, "total_gross": 0.0, "total_net": 0.0})
            d["employees"] += 1
            d["total_gross"] += r.gross
            d["total_net"] += r.net
        return [DepartmentPayroll(department=name, **data) for name, data in by_dept.items()]

    def build_attendance_report(self, *, start: date, end: date, employee_id: Optional[str] = None) -> ReportData:
        """Worked hours per day and per employee over ``start..end``."""
        if self._ledger is None:
            return ReportData(rows=[], summary=[])

        records = self._ledger.records_by_date_range(start, end)
        if employee_id:
            records = [r for r in records if r.employee_id == employee_id]
        records.sort(key=lambda r: (r.work_date, r.employee_name))

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for r in records:
            minutes = self._calculator.worked_minutes(r)
            out_rows.append(
                {
                    "employee_id": r.employee_id,
                    "employee_name": r.employee_name,
                    "department": r.employee.department or "-",
                    "work_date": r.work_date.isoformat(),
                    "check_in": r.check_in_time or "-",
                    "check_out": r.check_out_time or "-",
                    "worked_hours": _fmt_minutes(minutes),
                    "status": r.status.value,
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {"employee_id": r.employee_id, "employee_name": r.employee_name, "total_minutes": 0}
                summary_map[r.employee_id] = s
            s["total_minutes"] += minutes

        summary = sorted(summary_map.values(), key=lambda s: s["total_minutes"], reverse=True)
        return ReportData(
            rows=out_rows,
            summary=[
                {
                    "employee_id": s["employee_id"],
                    "employee_name": s["employee_name"],
                    "total_hours": _fmt_minutes(int(s["total_minutes"])),
                }
                for s in summary
            ],
        )
