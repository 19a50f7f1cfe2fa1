from __future__ import annotations

import logging
import secrets
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import is_valid_email
from ..core.constants import OTP_RESEND_COOLDOWN_SECONDS, OTP_TTL_SECONDS
from ..core.exceptions import RateLimitError, ValidationError
from .mailer import Mailer, MailNotConfiguredError
from .model import OTPRecord, OTPResult
from .repository import OTPStore

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "No OTP found for this email. Please request a new one."
MSG_EXPIRED = "OTP has expired. Please request a new one."
MSG_INVALID = "Invalid OTP. Please try again."
MSG_VERIFIED = "OTP verified successfully"


class ResendCooldownError(RateLimitError):
    """Raised when a new code is requested before the cooldown elapsed."""

    def __init__(self, seconds_left: int):
        super().__init__(f"Please wait {seconds_left} seconds before requesting a new OTP.")
        self.seconds_left = seconds_left


def generate_otp() -> str:
    """6-digit numeric code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


class OTPService:
    """Use case: issue, deliver and verify one-time passcodes."""

    def __init__(
        self,
        store: OTPStore,
        mailer: Optional[Mailer] = None,
        *,
        ttl_seconds: int = OTP_TTL_SECONDS,
        resend_cooldown_seconds: int = OTP_RESEND_COOLDOWN_SECONDS,
        clock: Callable[[], datetime] = now_local,
        code_factory: Callable[[], str] = generate_otp,
    ):
        self._store = store
        self._mailer = mailer
        self._ttl = timedelta(seconds=int(ttl_seconds))
        self._cooldown = timedelta(seconds=int(resend_cooldown_seconds))
        self._clock = clock
        self._code_factory = code_factory

    @property
    def ttl_minutes(self) -> int:
        return int(self._ttl.total_seconds() // 60)

    @property
    def mail_configured(self) -> bool:
        return self._mailer is not None

    def issue(self, email: str) -> OTPRecord:
        """Store a fresh code for ``email``, replacing any pending one."""
        now = self._clock()
        record = OTPRecord(email=email, otp=self._code_factory(), created_at=now, expires_at=now + self._ttl)
        self._store.put(record)
        logger.debug("OTP issued for %s (expires %s)", email, record.expires_at.isoformat())
        return record

    def seconds_until_resend(self, email: str) -> int:
        record = self._store.get(email)
        if not record or record.sent_at is None:
            return 0
        left = (record.sent_at + self._cooldown - self._clock()).total_seconds()
        return max(0, int(left + 0.999))

    def send(self, email: str) -> OTPRecord:
        """Issue a code and mail it.

        The code stays stored when delivery fails so that the caller can fall
        back to it; the mail error is re-raised for the caller to surface.
        The resend cooldown only starts once a code was delivered.
        """
        email = (email or "").strip()
        if not email:
            raise ValidationError("Email is required")
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        wait = self.seconds_until_resend(email)
        if wait:
            raise ResendCooldownError(wait)

        if self._mailer is None:
            logger.error("Attempted to send OTP to %s but email credentials are not configured", email)
            raise MailNotConfiguredError("Email service is not configured. Please contact administrator.")

        record = self.issue(email)
        self._mailer.send_otp(email, record.otp, ttl_minutes=self.ttl_minutes)
        record = replace(record, sent_at=self._clock())
        self._store.put(record)
        return record

    def verify(self, email: str, otp: str) -> OTPResult:
        record = self._store.get(email)
        if not record:
            return OTPResult(False, MSG_NOT_FOUND)

        if self._clock() > record.expires_at:
            self._store.delete(email)
            return OTPResult(False, MSG_EXPIRED)

        if not secrets.compare_digest(record.otp, str(otp or "").strip()):
            return OTPResult(False, MSG_INVALID)

        self._store.delete(email)
        logger.info("OTP verified successfully for %s", email)
        return OTPResult(True, MSG_VERIFIED)

    def has_valid_otp(self, email: str) -> bool:
        """Check for a live code without consuming it; drops an expired one."""
        record = self._store.get(email)
        if not record:
            return False
        if self._clock() > record.expires_at:
            self._store.delete(email)
            return False
        return True

    def cleanup_expired(self) -> int:
        now = self._clock()
        expired = [r.email for r in self._store.list_all() if r.expires_at < now]
        for email in expired:
            self._store.delete(email)
        return len(expired)
