from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.service import AttendanceLedger
from .attendance.storage_repository import StorageAttendanceRepository
from .common.datetime_utils import now_local
from .core.constants import HALF_DAY_HOURS, OTP_RESEND_COOLDOWN_SECONDS, OTP_TTL_SECONDS
from .employees.service import EmployeeService
from .employees.storage_repository import StorageEmployeeRepository
from .leave.service import LeaveService
from .leave.storage_repository import StorageLeaveRepository
from .otp.mailer import Mailer, SmtpMailer
from .otp.repository import InMemoryOTPStore
from .otp.service import OTPService
from .payroll.service import PayrollService
from .payroll.storage_repository import StoragePayrollRepository
from .storage.connection import DBConfig, DatabaseConnection
from .storage.json_file import JsonFileStorage
from .storage.memory import InMemoryStorage
from .storage.mysql_storage import MySQLStorage
from .storage.port import KeyValueStorage
from .users.service import AuthService
from .users.storage_repository import StorageUserRepository


@dataclass(frozen=True)
class Container:
    storage: KeyValueStorage

    users_repo: StorageUserRepository
    employees_repo: StorageEmployeeRepository
    attendance_repo: StorageAttendanceRepository
    leave_repo: StorageLeaveRepository
    payroll_repo: StoragePayrollRepository

    otp_service: OTPService
    auth_service: AuthService
    employee_service: EmployeeService
    attendance_ledger: AttendanceLedger
    leave_service: LeaveService
    payroll_service: PayrollService


def build_storage(*, backend: str, data_file: str = "", db_config: Optional[dict] = None) -> KeyValueStorage:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryStorage()
    if backend == "json":
        return JsonFileStorage(data_file)
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
        return MySQLStorage(conn)
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")


def build_container(
    *,
    storage: KeyValueStorage,
    mail_config: Optional[dict] = None,
    mailer: Optional[Mailer] = None,
    otp_ttl_seconds: int = OTP_TTL_SECONDS,
    otp_resend_cooldown_seconds: int = OTP_RESEND_COOLDOWN_SECONDS,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    if mailer is None and mail_config:
        mailer = SmtpMailer.from_config(mail_config)

    def today():
        return clock().date()

    users_repo = StorageUserRepository(storage)
    employees_repo = StorageEmployeeRepository(storage)
    attendance_repo = StorageAttendanceRepository(storage)
    leave_repo = StorageLeaveRepository(storage)
    payroll_repo = StoragePayrollRepository(storage)

    otp_service = OTPService(
        InMemoryOTPStore(),
        mailer,
        ttl_seconds=otp_ttl_seconds,
        resend_cooldown_seconds=otp_resend_cooldown_seconds,
        clock=clock,
    )
    employee_service = EmployeeService(employees_repo, today=today)
    auth_service = AuthService(
        users_repo,
        employee_service,
        otp_service,
        clock=clock,
        reset_window_seconds=otp_ttl_seconds,
    )
    attendance_ledger = AttendanceLedger(
        attendance_repo,
        strategy_factory=AttendanceStrategyFactory(half_day_hours=HALF_DAY_HOURS),
        clock=clock,
    )
    leave_service = LeaveService(leave_repo, attendance_ledger, today=today)
    payroll_service = PayrollService(payroll_repo, employee_service, attendance_ledger, clock=clock)

    return Container(
        storage=storage,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        otp_service=otp_service,
        auth_service=auth_service,
        employee_service=employee_service,
        attendance_ledger=attendance_ledger,
        leave_service=leave_service,
        payroll_service=payroll_service,
    )
