from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.dayflow.dayflow.attendance.service import AttendanceLedger
from src.dayflow.dayflow.attendance.storage_repository import StorageAttendanceRepository
from src.dayflow.dayflow.storage.memory import InMemoryStorage


class FakeClock:
    """Mutable clock injected wherever a service asks for ``now``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args) -> None:
        self.now = datetime(*args)

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday of ISO week 11
    return datetime(2025, 3, 10, 9, 2, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def ledger(storage, clock) -> AttendanceLedger:
    return AttendanceLedger(StorageAttendanceRepository(storage), clock=clock)
