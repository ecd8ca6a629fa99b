"""
Bounded, ordered activity log.
Keeps the most recent entries and drops the oldest ones first.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from .models import LogEntry, Severity

logger = logging.getLogger(__name__)

Subscriber = Callable[[LogEntry], None]


class LogBuffer:
    """
    Append-only ring buffer of LogEntry objects.

    Every producer (generators, operator actions, alerts) goes through
    append(), which assigns the id and timestamp. Entries leave the buffer
    only by capacity eviction.
    """

    def __init__(self, capacity: int = 50, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the log buffer.

        Args:
            capacity: Maximum number of entries kept (default: 50)
            clock: Callable returning the current time (default: UTC wall clock)
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._ids = itertools.count(1)
        # maxlen makes append + eviction of the oldest entry a single step.
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._subscribers: List[Subscriber] = []

    def append(self, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        """Create an entry, store it, and notify subscribers of the new tail."""
        entry = LogEntry(
            id=next(self._ids),
            message=message,
            timestamp=self._clock(),
            severity=Severity(severity),
        )
        self._entries.append(entry)
        logger.debug("Log entry #%s appended (%s entries kept)", entry.id, len(self._entries))

        for subscriber in list(self._subscribers):
            subscriber(entry)
        return entry

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for new entries. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def entries(self) -> Tuple[LogEntry, ...]:
        """Return the kept entries, oldest first."""
        return tuple(self._entries)

    @property
    def latest(self) -> Optional[LogEntry]:
        if self._entries:
            return self._entries[-1]
        return None

    def __len__(self) -> int:
        return len(self._entries)
