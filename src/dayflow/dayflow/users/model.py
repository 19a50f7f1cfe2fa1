from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class UserAccount:
    """Login account. Plain data object: no storage access here."""

    email: str
    employee_id: str
    password_hash: str
    role: Role
    verified: bool = True
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email


def account_to_dict(account: UserAccount) -> dict:
    return {
        "email": account.email,
        "employeeId": account.employee_id,
        "passwordHash": account.password_hash,
        "role": account.role.value,
        "verified": account.verified,
        "firstName": account.first_name,
        "lastName": account.last_name,
    }


def account_from_dict(data: dict) -> UserAccount:
    return UserAccount(
        email=data["email"],
        employee_id=str(data["employeeId"]),
        password_hash=data["passwordHash"],
        role=Role(data.get("role", Role.EMPLOYEE.value)),
        verified=bool(data.get("verified", True)),
        first_name=data.get("firstName") or "",
        last_name=data.get("lastName") or "",
    )
