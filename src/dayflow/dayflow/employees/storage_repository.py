from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.constants import StorageKeys
from ..storage.port import KeyValueStorage, load_json, save_json
from .model import Employee, employee_from_dict, employee_to_dict
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class StorageEmployeeRepository(EmployeeRepository):
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def list_all(self) -> Sequence[Employee]:
        out: list[Employee] = []
        for item in load_json(self._storage, StorageKeys.EMPLOYEES, []):
            try:
                out.append(employee_from_dict(item))
            except (KeyError, TypeError):
                logger.exception("Skipping malformed employee entry: %r", item)
        return out

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.list_all() if e.employee_id == employee_id), None)

    def save_all(self, employees: Sequence[Employee]) -> bool:
        return save_json(self._storage, StorageKeys.EMPLOYEES, [employee_to_dict(e) for e in employees])
