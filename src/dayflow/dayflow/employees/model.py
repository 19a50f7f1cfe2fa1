from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Employee directory entry."""

    employee_id: str
    name: str
    department: str
    position: str
    email: str
    phone: str = ""
    join_date: str = ""
    status: str = "active"
    salary: float = 0
    address: str = ""
    emergency_contact: str = ""
    skills: tuple[str, ...] = field(default_factory=tuple)
    rating: Optional[int] = None


FIELD_TO_KEY = {
    "employee_id": "id",
    "name": "name",
    "department": "department",
    "position": "position",
    "email": "email",
    "phone": "phone",
    "join_date": "joinDate",
    "status": "status",
    "salary": "salary",
    "address": "address",
    "emergency_contact": "emergencyContact",
    "skills": "skills",
    "rating": "rating",
}


def employee_to_dict(employee: Employee) -> dict:
    data = {key: getattr(employee, attr) for attr, key in FIELD_TO_KEY.items()}
    data["skills"] = list(employee.skills)
    return data


def employee_from_dict(data: dict) -> Employee:
    kwargs = {attr: data[key] for attr, key in FIELD_TO_KEY.items() if data.get(key) is not None}
    kwargs["employee_id"] = str(data["id"])
    kwargs["skills"] = tuple(data.get("skills") or ())
    return Employee(**kwargs)
