from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ..core.constants import LEAVE_MAX_FUTURE_MONTHS, MIN_PASSWORD_LENGTH
from ..core.exceptions import ValidationError
from .datetime_utils import add_months

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long.")
    return value.strip()


def is_valid_email(value: str) -> bool:
    return bool(value) and EMAIL_RE.match(value) is not None


def require_email(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError("Email is required.")
    if not is_valid_email(value):
        raise ValidationError("Please enter a valid email address.")
    return value


def password_strength_error(password: str) -> Optional[str]:
    """Return the first failed strength rule as a message, or None."""
    pwd = password or ""
    if len(pwd) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
    if not re.search(r"[A-Z]", pwd):
        return "Password must contain at least one uppercase letter."
    if not re.search(r"[a-z]", pwd):
        return "Password must contain at least one lowercase letter."
    if not re.search(r"[0-9]", pwd):
        return "Password must contain at least one number."
    if not re.search(r"[!@#$%^&*]", pwd):
        return "Password must contain at least one special character (!@#$%^&*)."
    return None


def require_strong_password(password: str, confirm_password: str) -> str:
    error = password_strength_error(password)
    if error:
        raise ValidationError(error)
    if password != confirm_password:
        raise ValidationError("Passwords do not match.")
    return password


def validate_complete_date_range(
    start: Optional[date],
    end: Optional[date],
    *,
    today: date,
    allow_past_dates: bool = False,
    max_future_months: int = LEAVE_MAX_FUTURE_MONTHS,
) -> None:
    if not start:
        raise ValidationError("Start date is required")
    if not end:
        raise ValidationError("End date is required")

    if not allow_past_dates and start < today:
        raise ValidationError("Start date cannot be before today")

    if max_future_months and start > add_months(today, max_future_months):
        raise ValidationError(f"Start date cannot be more than {max_future_months} months in the future")

    if end < start:
        raise ValidationError("End date cannot be before start date")


def days_between(start: date, end: date) -> int:
    """Inclusive day count (both ends included)."""
    return (end - start).days + 1
