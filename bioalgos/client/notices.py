"""User-visible notices, de-duplicated by id."""
from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

_LEVELS = {
    'info': logging.INFO,
    'success': logging.INFO,
    'error': logging.ERROR,
}


class Notifier:
    """Logs notices and forwards them to listeners.

    A notice sent with a ``notice_id`` already seen by this notifier is
    dropped, so a condition that fires on every request is shown once.
    """

    def __init__(self):
        self._listeners: list[Callable[[str, str], None]] = []
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def subscribe(self, listener: Callable[[str, str], None]) -> None:
        """Register ``listener(level, message)``."""
        self._listeners.append(listener)

    def notify(self, level: str, message: str, notice_id: str | None = None) -> bool:
        if notice_id is not None:
            with self._lock:
                if notice_id in self._seen:
                    return False
                self._seen.add(notice_id)

        logger.log(_LEVELS.get(level, logging.INFO), message)
        for listener in list(self._listeners):
            listener(level, message)
        return True

    def info(self, message, notice_id=None):
        return self.notify('info', message, notice_id)

    def success(self, message, notice_id=None):
        return self.notify('success', message, notice_id)

    def error(self, message, notice_id=None):
        return self.notify('error', message, notice_id)
