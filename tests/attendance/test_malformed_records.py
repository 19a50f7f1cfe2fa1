import json

from src.dayflow.dayflow.attendance.service import AttendanceLedger

from src.dayflow.dayflow.attendance.storage_repository import StorageAttendanceRepository
from src.dayflow.dayflow.core.constants import StorageKeys
from src.dayflow.dayflow.storage.memory import InMemoryStorage


def test_malformed_entries_are_skipped():
    storage = InMemoryStorage(
        {
            StorageKeys.ATTENDANCE_RECORDS: json.dumps(
                [
                    {"employeeId": "EMP-001", "date": "2025-03-10", "checkInTime": "09:00", "kind": "open"},
                    {"employeeId": "EMP-002"},
                    {"employeeId": "EMP-003", "date": "not-a-date", "checkInTime": "09:00"},
                ]
            )
        }
    )
    repo = StorageAttendanceRepository(storage)
    assert [r.employee_id for r in repo.list_all()] == ["EMP-001"]


def test_unparseable_document_reads_as_empty():
    storage = InMemoryStorage({StorageKeys.ATTENDANCE_RECORDS: "{not json"})
    repo = StorageAttendanceRepository(storage)
    assert repo.list_all() == []
    assert repo.list_markers() == []


def test_absent_day_without_times_counts_as_absent(clock):
    storage = InMemoryStorage(
        {
            StorageKeys.ATTENDANCE_RECORDS: json.dumps(
                [{"employeeId": "EMP-001", "employeeName": "Ana Lopez", "date": "2025-03-10", "status": "Absent"}]
            )
        }
    )
    ledger = AttendanceLedger(StorageAttendanceRepository(storage), clock=clock)

    summary = ledger.weekly_summary(11, 2025, "EMP-001")
    assert summary.absent_days == 1
    assert summary.leave_days == 0


def test_sweep_handles_utc_marker_timestamps(clock):
    storage = InMemoryStorage(
        {
            StorageKeys.ACTIVE_CLOCK_INS: json.dumps(
                [
                    {
                        "employeeId": "EMP-001",
                        "employeeName": "Ana Lopez",
                        "date": "2025-03-08",
                        "checkInTime": "09:00",
                        "timestamp": "2025-03-08T09:00:00.000Z",
                    }
                ]
            )
        }
    )
    ledger = AttendanceLedger(StorageAttendanceRepository(storage), clock=clock)

    assert ledger.expire_stale_clock_ins() == 1
    assert ledger.active_clock_ins() == []
