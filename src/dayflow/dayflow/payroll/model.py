from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class SalaryStructure:
    basic: float = 0
    housing: float = 0
    transport: float = 0
    medical: float = 0
    other: float = 0

    @property
    def total(self) -> float:
        return self.basic + self.housing + self.transport + self.medical + self.other


@dataclass(frozen=True)
class Deductions:
    tax: float = 0
    insurance: float = 0
    provident_fund: float = 0
    other: float = 0

    @property
    def total(self) -> float:
        return self.tax + self.insurance + self.provident_fund + self.other


@dataclass(frozen=True)
class PayrollEntry:
    """What is persisted per employee; gross and net are derived."""

    employee_id: str
    salary_structure: SalaryStructure
    deductions: Deductions
    status: str
    payment_date: Optional[date] = None
    processed_by: str = ""
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class PayrollRecord:
    """Read-model joining a payroll entry with the employee directory."""

    employee_id: str
    employee_name: str
    email: str
    department: str
    position: str
    hire_date: str
    salary_structure: SalaryStructure
    deductions: Deductions
    gross: float
    net: float
    status: str
    payment_date: Optional[date] = None
    processed_by: str = ""
    last_updated: Optional[str] = None


@dataclass(frozen=True)
class SalaryStructureChange:
    employee_id: str
    salary_structure: SalaryStructure
    total_gross: float
    effective_date: date
    updated_by: str


@dataclass(frozen=True)
class PayrollSummary:
    total_employees: int
    total_gross_payroll: float
    total_deductions: float
    total_net_payroll: float
    processing_date: date


@dataclass(frozen=True)
class DepartmentPayroll:
    department: str
    employees: int
    total_gross: float
    total_net: float


def entry_to_dict(entry: PayrollEntry) -> dict:
    return {
        "employeeId": entry.employee_id,
        "salaryStructure": asdict(entry.salary_structure),
        "deductions": asdict(entry.deductions),
        "status": entry.status,
        "paymentDate": entry.payment_date.isoformat() if entry.payment_date else None,
        "processedBy": entry.processed_by,
        "lastUpdated": entry.last_updated,
    }


def entry_from_dict(data: dict) -> PayrollEntry:
    return PayrollEntry(
        employee_id=str(data["employeeId"]),
        salary_structure=SalaryStructure(**data.get("salaryStructure", {})),
        deductions=Deductions(**data.get("deductions", {})),
        status=data.get("status") or "pending",
        payment_date=date.fromisoformat(data["paymentDate"]) if data.get("paymentDate") else None,
        processed_by=data.get("processedBy") or "",
        last_updated=data.get("lastUpdated"),
    )


def change_to_dict(change: SalaryStructureChange) -> dict:
    return {
        "employeeId": change.employee_id,
        **asdict(change.salary_structure),
        "totalGross": change.total_gross,
        "effectiveDate": change.effective_date.isoformat(),
        "updatedBy": change.updated_by,
    }


def change_from_dict(data: dict) -> SalaryStructureChange:
    return SalaryStructureChange(
        employee_id=str(data["employeeId"]),
        salary_structure=SalaryStructure(
            basic=data.get("basic", 0),
            housing=data.get("housing", 0),
            transport=data.get("transport", 0),
            medical=data.get("medical", 0),
            other=data.get("other", 0),
        ),
        total_gross=float(data.get("totalGross", 0)),
        effective_date=date.fromisoformat(data["effectiveDate"]),
        updated_by=data.get("updatedBy") or "",
    )
