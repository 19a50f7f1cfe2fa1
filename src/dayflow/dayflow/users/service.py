from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_strong_password
from ..core.constants import MIN_EMPLOYEE_ID_LENGTH, OTP_LENGTH, OTP_TTL_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..employees.service import EmployeeService
from ..otp.mailer import MailError
from ..otp.model import OTPResult
from ..otp.service import OTPService
from .model import UserAccount
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    email: str
    employee_id: str
    role: Role
    display_name: str


@dataclass(frozen=True)
class ResetRequestResult:
    """Outcome of a password-reset request.

    ``delivered`` is False when the mail could not be sent; the code is then
    only held server-side and ``message`` carries the delivery failure.
    """

    delivered: bool
    message: str


class AuthService:
    """Use cases: sign up, sign in and OTP-backed password reset."""

    def __init__(
        self,
        users: UserRepository,
        employees: EmployeeService,
        otp: OTPService,
        *,
        clock: Callable[[], datetime] = now_local,
        reset_window_seconds: int = OTP_TTL_SECONDS,
    ):
        self._users = users
        self._employees = employees
        self._otp = otp
        self._clock = clock
        self._reset_window = timedelta(seconds=int(reset_window_seconds))
        self._reset_grants: dict[str, datetime] = {}

    @staticmethod
    def _to_session(user: UserAccount) -> SessionUser:
        return SessionUser(
            email=user.email,
            employee_id=user.employee_id,
            role=user.role,
            display_name=user.display_name,
        )

    def sign_up(
        self,
        *,
        employee_id: str,
        email: str,
        password: str,
        confirm_password: str,
        role: Role = Role.EMPLOYEE,
        first_name: str = "",
        last_name: str = "",
        department: str = "",
        position: str = "",
    ) -> SessionUser:
        employee_id = require_min_length(employee_id or "", "Employee ID", MIN_EMPLOYEE_ID_LENGTH)
        email = require_email(email)
        require_strong_password(password, confirm_password)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered.")
        if self._users.get_by_employee_id(employee_id):
            raise ValidationError("Employee ID is already registered.")

        account = UserAccount(
            email=email,
            employee_id=employee_id,
            password_hash=generate_password_hash(password),
            role=role,
            verified=True,
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
        )
        if not self._users.add(account):
            raise ValidationError("An error occurred during registration. Please try again.")

        self._employees.add_from_registration(
            employee_id=employee_id,
            email=email,
            first_name=account.first_name,
            last_name=account.last_name,
            department=department,
            position=position,
        )
        logger.info("User registered: %s (%s)", email, employee_id)
        return self._to_session(account)

    def sign_in(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip())
        if not user or not user.verified:
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. corrupted or unsupported hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password.")
        return self._to_session(user)

    def request_password_reset(self, email: str) -> ResetRequestResult:
        email = require_email(email)
        if not self._users.get_by_email(email):
            raise ValidationError("No account found with this email address.")

        try:
            self._otp.send(email)
        except MailError as e:
            # Keep a server-side code so the flow can still be completed.
            if not self._otp.has_valid_otp(email):
                self._otp.issue(email)
            logger.warning("Password reset mail to %s failed: %s", email, e)
            return ResetRequestResult(delivered=False, message=f"Email sending failed: {e}")

        return ResetRequestResult(delivered=True, message="OTP sent successfully!")

    def verify_reset_code(self, email: str, otp: str) -> OTPResult:
        if not otp or len(str(otp).strip()) != OTP_LENGTH:
            return OTPResult(False, "Please enter the complete 6-digit code.")
        result = self._otp.verify(email, otp)
        if result.success:
            self._reset_grants[email] = self._clock()
        return result

    def reset_password(self, email: str, password: str, confirm_password: str) -> None:
        granted_at = self._reset_grants.get(email)
        if granted_at is None or self._clock() - granted_at > self._reset_window:
            self._reset_grants.pop(email, None)
            raise AuthorizationError("Please verify the OTP sent to your email first.")

        require_strong_password(password, confirm_password)
        if not self._users.update_password(email, generate_password_hash(password)):
            raise ValidationError("User not found.")

        del self._reset_grants[email]
        logger.info("Password reset for %s", email)
