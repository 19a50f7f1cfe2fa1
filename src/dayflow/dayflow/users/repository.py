from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import UserAccount


class UserRepository(Protocol):
    """Repository interface for login accounts.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_email(self, email: str) -> Optional[UserAccount]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[UserAccount]:
        raise NotImplementedError

    def add(self, account: UserAccount) -> bool:
        raise NotImplementedError

    def update_password(self, email: str, password_hash: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[UserAccount]:
        raise NotImplementedError
