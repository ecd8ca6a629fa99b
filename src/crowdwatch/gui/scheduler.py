"""
QTimer-backed scheduler so console timers run on the Qt event loop.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from PySide6.QtCore import QTimer


class _QtTimer:
    """One console timer wrapped around a QTimer."""

    def __init__(self, delay: float, interval: Optional[float], callback: Callable[[], None]):
        self._callback = callback
        self._repeating = interval is not None
        self._active = True

        self._timer = QTimer()
        self._timer.setSingleShot(not self._repeating)
        self._timer.timeout.connect(self._fire)
        self._timer.start(int(delay * 1000))

    @property
    def active(self) -> bool:
        return self._active

    def _fire(self):
        if not self._active:
            return
        if not self._repeating:
            self._active = False
        self._callback()

    def cancel(self) -> None:
        self._active = False
        self._timer.stop()


class QtScheduler:
    """Scheduler for the desktop GUI. Must be created after QApplication."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _QtTimer:
        return _QtTimer(delay, None, callback)

    def call_every(self, interval: float, callback: Callable[[], None]) -> _QtTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        return _QtTimer(interval, interval, callback)
