from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Storage port: a flat map of namespaced keys to serialized JSON strings.

    Repositories depend on this interface, never on a concrete backend.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


def load_json(storage: KeyValueStorage, key: str, default: Any) -> Any:
    """Read and parse ``key``; log and fall back to ``default`` on any failure."""
    try:
        raw = storage.get_item(key)
        return json.loads(raw) if raw else default
    except Exception:
        logger.exception("Error reading %s from storage", key)
        return default


def save_json(storage: KeyValueStorage, key: str, value: Any) -> bool:
    try:
        storage.set_item(key, json.dumps(value))
        return True
    except Exception:
        logger.exception("Error saving %s to storage", key)
        return False
