from __future__ import annotations

import logging

from ..core.constants import StorageKeys
from ..storage.port import KeyValueStorage, load_json, save_json
from .model import LeaveBook, leave_from_dict, leave_to_dict
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class StorageLeaveRepository(LeaveRepository):
    """Leave data stored as ``{"leaveRequests": [...], "recentDecisions": [...]}``."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def load(self) -> LeaveBook:
        data = load_json(self._storage, StorageKeys.LEAVE_DATA, {})
        if not isinstance(data, dict):
            logger.error("Unexpected leave data shape, ignoring stored value")
            return LeaveBook()
        try:
            return LeaveBook(
                requests=[leave_from_dict(r) for r in data.get("leaveRequests", [])],
                decisions=[leave_from_dict(r) for r in data.get("recentDecisions", [])],
            )
        except (KeyError, TypeError, ValueError):
            logger.exception("Error reading leave data from storage")
            return LeaveBook()

    def save(self, book: LeaveBook) -> bool:
        return save_json(
            self._storage,
            StorageKeys.LEAVE_DATA,
            {
                "leaveRequests": [leave_to_dict(r) for r in book.requests],
                "recentDecisions": [leave_to_dict(r) for r in book.decisions],
            },
        )
