"""
Timer scheduling for the console.

All console timers (generator intervals, density updates, the alert
deactivation) go through a Scheduler owned by the console instance, so the
same code runs on a simulated clock in tests, on an asyncio loop behind the
HTTP API, and on QTimer in the desktop GUI.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Single-threaded timer source used by the console."""

    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callback) -> TimerHandle: ...

    def call_every(self, interval: float, callback: Callback) -> TimerHandle: ...


class _ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", due: float, interval: Optional[float], callback: Callback):
        self._scheduler = scheduler
        self.due = due
        self.interval = interval
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """
    Deterministic scheduler driven by advance().

    Timers due at the same instant fire in registration order. The clock is
    moved to each timer's due time before its callback runs, so timestamps
    taken inside callbacks are exact.
    """

    def __init__(self, start: Optional[datetime] = None):
        self._start = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self._elapsed = 0.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, _ManualTimer]] = []

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def call_later(self, delay: float, callback: Callback) -> _ManualTimer:
        return self._schedule(delay, None, callback)

    def call_every(self, interval: float, callback: Callback) -> _ManualTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        return self._schedule(interval, interval, callback)

    def _schedule(self, delay: float, interval: Optional[float], callback: Callback) -> _ManualTimer:
        timer = _ManualTimer(self, self._elapsed + max(delay, 0.0), interval, callback)
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every timer that comes due."""
        if seconds < 0:
            raise ValueError("cannot move the clock backwards")
        target = self._elapsed + seconds

        while self._queue and self._queue[0][0] <= target:
            due, seq, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._elapsed = due
            if timer.interval is None:
                timer.cancel()
            else:
                # Reuse the first sequence number so repeating timers
                # stay in registration order.
                timer.due = due + timer.interval
                heapq.heappush(self._queue, (timer.due, seq, timer))
            timer.callback()

        self._elapsed = target

    def cancel_all(self) -> None:
        for _, _, timer in self._queue:
            timer.cancel()
        self._queue.clear()


class _AsyncioTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, delay: float, interval: Optional[float], callback: Callback):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._active = True
        self._handle = loop.call_later(delay, self._fire)

    @property
    def active(self) -> bool:
        return self._active

    def _fire(self) -> None:
        if not self._active:
            return
        if self._interval is None:
            self._active = False
        else:
            self._handle = self._loop.call_later(self._interval, self._fire)
        try:
            self._callback()
        except Exception:
            # Keep the loop alive; the traceback goes to the log.
            logger.exception("Scheduled callback failed")

    def cancel(self) -> None:
        self._active = False
        self._handle.cancel()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop (used by the HTTP API)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callback) -> _AsyncioTimer:
        return _AsyncioTimer(self._loop, delay, None, callback)

    def call_every(self, interval: float, callback: Callback) -> _AsyncioTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        return _AsyncioTimer(self._loop, interval, interval, callback)
