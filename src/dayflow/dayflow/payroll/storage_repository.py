from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.constants import StorageKeys
from ..storage.port import KeyValueStorage, load_json, save_json
from .model import (
    PayrollEntry,
    SalaryStructureChange,
    change_from_dict,
    change_to_dict,
    entry_from_dict,
    entry_to_dict,
)
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class StoragePayrollRepository(PayrollRepository):
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def list_entries(self) -> Sequence[PayrollEntry]:
        out: list[PayrollEntry] = []
        for item in load_json(self._storage, StorageKeys.PAYROLL_DATA, []):
            try:
                out.append(entry_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.exception("Skipping malformed payroll entry: %r", item)
        return out

    def get_entry(self, employee_id: str) -> Optional[PayrollEntry]:
        return next((e for e in self.list_entries() if e.employee_id == employee_id), None)

    def save_entry(self, entry: PayrollEntry) -> bool:
        entries = [e for e in self.list_entries() if e.employee_id != entry.employee_id]
        entries.append(entry)
        return save_json(self._storage, StorageKeys.PAYROLL_DATA, [entry_to_dict(e) for e in entries])

    def list_structure_changes(self) -> Sequence[SalaryStructureChange]:
        out: list[SalaryStructureChange] = []
        for item in load_json(self._storage, StorageKeys.SALARY_STRUCTURES, []):
            try:
                out.append(change_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.exception("Skipping malformed salary structure entry: %r", item)
        return out

    def save_structure_change(self, change: SalaryStructureChange) -> bool:
        changes = [c for c in self.list_structure_changes() if c.employee_id != change.employee_id]
        changes.append(change)
        return save_json(self._storage, StorageKeys.SALARY_STRUCTURES, [change_to_dict(c) for c in changes])
