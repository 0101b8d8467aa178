"""Bounded, subscribable in-memory log channel for encoder/pipeline output."""

from __future__ import annotations

from collections import deque
import logging
from threading import Lock
from typing import Callable, Deque, List


logger = logging.getLogger(__name__)

LogSubscriber = Callable[[str], None]


class LogStream:
    """Keeps the most recent ``window`` lines and fans each new line out to subscribers."""

    def __init__(self, window: int = 120) -> None:
        self.window = max(1, int(window))
        self._lines: Deque[str] = deque(maxlen=self.window)
        self._subscribers: List[LogSubscriber] = []
        self._lock = Lock()

    def append(self, line: str) -> None:
        text = str(line or "").rstrip("\r\n")
        with self._lock:
            self._lines.append(text)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(text)
            except Exception:
                logger.debug("Log subscriber failed", exc_info=True)

    def subscribe(self, callback: LogSubscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that removes it again."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def lines(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
