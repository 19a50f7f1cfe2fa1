from __future__ import annotations

from typing import Protocol

from .model import LeaveBook


class LeaveRepository(Protocol):
    def load(self) -> LeaveBook:
        raise NotImplementedError

    def save(self, book: LeaveBook) -> bool:
        raise NotImplementedError
