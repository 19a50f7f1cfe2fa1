from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..core.constants import StorageKeys
from ..storage.port import KeyValueStorage, load_json, save_json
from .model import UserAccount, account_from_dict, account_to_dict
from .repository import UserRepository

logger = logging.getLogger(__name__)


class StorageUserRepository(UserRepository):
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def list_all(self) -> Sequence[UserAccount]:
        out: list[UserAccount] = []
        for item in load_json(self._storage, StorageKeys.USERS, []):
            try:
                out.append(account_from_dict(item))
            except (KeyError, ValueError):
                logger.exception("Skipping malformed user account")
        return out

    def _save_all(self, accounts: Sequence[UserAccount]) -> bool:
        return save_json(self._storage, StorageKeys.USERS, [account_to_dict(a) for a in accounts])

    def get_by_email(self, email: str) -> Optional[UserAccount]:
        email = email.strip().lower()
        return next((a for a in self.list_all() if a.email.lower() == email), None)

    def get_by_employee_id(self, employee_id: str) -> Optional[UserAccount]:
        return next((a for a in self.list_all() if a.employee_id == employee_id), None)

    def add(self, account: UserAccount) -> bool:
        accounts = list(self.list_all())
        accounts.append(account)
        return self._save_all(accounts)

    def update_password(self, email: str, password_hash: str) -> bool:
        accounts = list(self.list_all())
        for i, a in enumerate(accounts):
            if a.email.lower() == email.strip().lower():
                accounts[i] = replace(a, password_hash=password_hash)
                return self._save_all(accounts)
        return False
