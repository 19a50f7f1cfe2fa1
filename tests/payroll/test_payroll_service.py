from __future__ import annotations

from datetime import date

import pytest

from src.dayflow.dayflow.core.exceptions import ValidationError
from src.dayflow.dayflow.employees.service import EmployeeService
from src.dayflow.dayflow.employees.storage_repository import StorageEmployeeRepository
from src.dayflow.dayflow.payroll.model import Deductions, SalaryStructure
from src.dayflow.dayflow.payroll.service import PayrollService
from src.dayflow.dayflow.payroll.storage_repository import StoragePayrollRepository

STRUCTURE = SalaryStructure(basic=5000, housing=1500, transport=300, medical=200, other=0)


@pytest.fixture
def employees(storage):
    service = EmployeeService(StorageEmployeeRepository(storage), today=lambda: date(2025, 1, 6))
    service.add_employee(name="Ana Lopez", email="ana@dayflow.io", department="Engineering", position="Developer")
    service.add_employee(name="Ben Okafor", email="ben@dayflow.io", department="Sales", position="Account Manager")
    service.add_employee(name="Cara Diaz", email="cara@dayflow.io", department="Engineering", position="QA")
    return service


@pytest.fixture
def payroll(storage, employees, ledger, clock):
    return PayrollService(StoragePayrollRepository(storage), employees, ledger, clock=clock)


def test_employee_without_structure_is_na(payroll):
    record = payroll.employee_payroll("EMP-001")
    assert record.status == "NA"
    assert record.gross == 0
    assert record.net == 0
    assert record.employee_name == "Ana Lopez"
    assert record.hire_date == "2025-01-06"


def test_unknown_employee(payroll):
    assert payroll.employee_payroll("EMP-404") is None
    assert payroll.update_salary_structure("EMP-404", STRUCTURE) is False


def test_update_salary_structure(payroll):
    assert payroll.update_salary_structure("EMP-001", STRUCTURE, updated_by="Hana HR")

    record = payroll.employee_payroll("EMP-001")
    assert record.status == "updated"
    assert record.gross == 7000
    assert record.net == 7000
    assert record.processed_by == "Hana HR"

    history = payroll.salary_history("EMP-001")
    assert len(history) == 1
    assert history[0].total_gross == 7000
    assert history[0].effective_date == date(2025, 3, 10)


def test_history_keeps_latest_structure_per_employee(payroll):
    payroll.update_salary_structure("EMP-001", STRUCTURE)
    payroll.update_salary_structure("EMP-001", SalaryStructure(basic=6000))

    history = payroll.salary_history("EMP-001")
    assert [h.total_gross for h in history] == [6000]


def test_negative_amounts_rejected(payroll):
    with pytest.raises(ValidationError, match="Basic must be a non-negative number"):
        payroll.update_salary_structure("EMP-001", SalaryStructure(basic=-1))
    with pytest.raises(ValidationError, match="Provident fund must be a non-negative number"):
        payroll.update_deductions("EMP-001", Deductions(provident_fund=-5))


def test_deductions_reduce_net_and_keep_structure(payroll):
    payroll.update_salary_structure("EMP-001", STRUCTURE)
    payroll.update_deductions("EMP-001", Deductions(tax=700, insurance=150, provident_fund=250))

    record = payroll.employee_payroll("EMP-001")
    assert record.salary_structure == STRUCTURE
    assert record.net == 5900


def test_mark_processed(payroll):
    assert payroll.mark_processed("EMP-001") is False
    payroll.update_salary_structure("EMP-001", STRUCTURE)

    assert payroll.mark_processed("EMP-001", processed_by="Hana HR")
    record = payroll.employee_payroll("EMP-001")
    assert record.status == "processed"
    assert record.payment_date == date(2025, 3, 10)


def test_summary_and_department_breakdown(payroll):
    payroll.update_salary_structure("EMP-001", STRUCTURE)
    payroll.update_deductions("EMP-001", Deductions(tax=1000))
    payroll.update_salary_structure("EMP-002", SalaryStructure(basic=4000))
    payroll.update_salary_structure("EMP-003", SalaryStructure(basic=3000))

    summary = payroll.summary()
    assert summary.total_employees == 3
    assert summary.total_gross_payroll == 14000
    assert summary.total_deductions == 1000
    assert summary.total_net_payroll == 13000
    assert summary.processing_date == date(2025, 3, 10)

    by_dept = {d.department: d for d in payroll.department_breakdown()}
    assert by_dept["Engineering"].employees == 2
    assert by_dept["Engineering"].total_gross == 10000
    assert by_dept["Sales"].total_net == 4000


def test_all_employee_payroll_lists_directory(payroll):
    payroll.update_salary_structure("EMP-002", SalaryStructure(basic=4000))
    statuses = {r.employee_id: r.status for r in payroll.all_employee_payroll()}
    assert statuses == {"EMP-001": "NA", "EMP-002": "updated", "EMP-003": "NA"}


def test_attendance_report(payroll, ledger, clock):
    clock.set(2025, 3, 10, 9, 0)
    ledger.check_in("EMP-001", "Ana Lopez", "Engineering", "Developer")
    ledger.check_in("EMP-002", "Ben Okafor", "Sales", "Account Manager")
    clock.set(2025, 3, 10, 17, 30)
    ledger.check_out("EMP-001")
    clock.set(2025, 3, 11, 9, 0)
    ledger.check_in("EMP-001", "Ana Lopez", "Engineering", "Developer")
    clock.set(2025, 3, 11, 12, 15)
    ledger.check_out("EMP-001")

    data = payroll.build_attendance_report(start=date(2025, 3, 10), end=date(2025, 3, 11))

    assert [(r["work_date"], r["employee_id"], r["worked_hours"]) for r in data.rows] == [
        ("2025-03-10", "EMP-001", "08:30"),
        ("2025-03-10", "EMP-002", "00:00"),
        ("2025-03-11", "EMP-001", "03:15"),
    ]
    assert data.rows[1]["check_out"] == "-"
    assert data.summary == [
        {"employee_id": "EMP-001", "employee_name": "Ana Lopez", "total_hours": "11:45"},
        {"employee_id": "EMP-002", "employee_name": "Ben Okafor", "total_hours": "00:00"},
    ]


def test_attendance_report_filtered_by_employee(payroll, ledger):
    ledger.check_in("EMP-001", "Ana Lopez", "Engineering", "Developer")
    ledger.check_in("EMP-002", "Ben Okafor", "Sales", "Account Manager")

    data = payroll.build_attendance_report(start=date(2025, 3, 1), end=date(2025, 3, 31), employee_id="EMP-002")
    assert [r["employee_id"] for r in data.rows] == ["EMP-002"]
