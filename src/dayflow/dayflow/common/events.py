from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """Observer Pattern: zero-argument "something changed" fan-out.

    A listener that raises is logged and skipped; the remaining listeners
    still run.
    """

    def __init__(self, name: str = "change"):
        self._name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Error in %s listener %r", self._name, listener)

    def __len__(self) -> int:
        return len(self._listeners)
