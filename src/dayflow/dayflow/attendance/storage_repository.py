from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..core.constants import StorageKeys
from ..storage.port import KeyValueStorage, load_json, save_json
from .model import (
    ActiveClockIn,
    AttendanceRecord,
    marker_from_dict,
    marker_to_dict,
    record_from_dict,
    record_to_dict,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class StorageAttendanceRepository(AttendanceRepository):
    """Attendance repository over the key-value storage port.

    Records live as one JSON list under ``attendance_records``; markers under
    ``active_clock_ins``. Unreadable entries are skipped and logged.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def _load_records(self) -> list[AttendanceRecord]:
        out: list[AttendanceRecord] = []
        for item in load_json(self._storage, StorageKeys.ATTENDANCE_RECORDS, []):
            try:
                out.append(record_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.exception("Skipping malformed attendance record: %r", item)
        return out

    def list_all(self) -> Sequence[AttendanceRecord]:
        return self._load_records()

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._load_records():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def save(self, record: AttendanceRecord) -> bool:
        records = self._load_records()
        for i, r in enumerate(records):
            if r.employee_id == record.employee_id and r.work_date == record.work_date:
                records[i] = record
                break
        else:
            records.append(record)
        return save_json(self._storage, StorageKeys.ATTENDANCE_RECORDS, [record_to_dict(r) for r in records])

    def list_markers(self) -> Sequence[ActiveClockIn]:
        out: list[ActiveClockIn] = []
        for item in load_json(self._storage, StorageKeys.ACTIVE_CLOCK_INS, []):
            try:
                out.append(marker_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.exception("Skipping malformed clock-in marker: %r", item)
        return out

    def save_marker(self, marker: ActiveClockIn) -> bool:
        markers = [m for m in self.list_markers() if m.employee_id != marker.employee_id]
        markers.append(marker)
        return self.replace_markers(markers)

    def remove_marker(self, employee_id: str) -> bool:
        markers = [m for m in self.list_markers() if m.employee_id != employee_id]
        return self.replace_markers(markers)

    def replace_markers(self, markers: Sequence[ActiveClockIn]) -> bool:
        return save_json(self._storage, StorageKeys.ACTIVE_CLOCK_INS, [marker_to_dict(m) for m in markers])
