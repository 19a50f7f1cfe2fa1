from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollEntry, SalaryStructureChange


class PayrollRepository(Protocol):
    def list_entries(self) -> Sequence[PayrollEntry]:
        raise NotImplementedError

    def get_entry(self, employee_id: str) -> Optional[PayrollEntry]:
        raise NotImplementedError

    def save_entry(self, entry: PayrollEntry) -> bool:
        raise NotImplementedError

    def list_structure_changes(self) -> Sequence[SalaryStructureChange]:
        raise NotImplementedError

    def save_structure_change(self, change: SalaryStructureChange) -> bool:
        """Keep only the latest change per employee."""

        raise NotImplementedError
