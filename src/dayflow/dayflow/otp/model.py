from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class OTPRecord:
    email: str
    otp: str
    created_at: datetime
    expires_at: datetime
    # set once the code was actually delivered; the resend cooldown runs from here
    sent_at: Optional[datetime] = None


@dataclass(frozen=True)
class OTPResult:
    success: bool
    message: str
