from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OTPRecord


class OTPStore(Protocol):
    """One pending code per email address."""

    def get(self, email: str) -> Optional[OTPRecord]:
        raise NotImplementedError

    def put(self, record: OTPRecord) -> None:
        raise NotImplementedError

    def delete(self, email: str) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[OTPRecord]:
        raise NotImplementedError


class InMemoryOTPStore(OTPStore):
    """Server-held map keyed by email; codes do not survive a restart."""

    def __init__(self):
        self._by_email: dict[str, OTPRecord] = {}

    def get(self, email: str) -> Optional[OTPRecord]:
        return self._by_email.get(email)

    def put(self, record: OTPRecord) -> None:
        self._by_email[record.email] = record

    def delete(self, email: str) -> None:
        self._by_email.pop(email, None)

    def list_all(self) -> Sequence[OTPRecord]:
        return list(self._by_email.values())
