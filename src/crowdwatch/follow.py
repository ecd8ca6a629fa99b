"""
Follow-state tracking for the activity log viewport.

Decides whether new entries should scroll into view. The tracker is fed
scroll samples from whatever widget renders the log; it never reads the
widget itself.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .models import FollowMode, LogEntry

logger = logging.getLogger(__name__)


class FollowStateTracker:
    """
    Two-state machine: FOLLOWING (auto-scroll on append) or DETACHED.

    While detached, appends raise the "new messages available" flag instead
    of scrolling. Appends never change the mode.
    """

    def __init__(self, threshold_px: int = 10, on_auto_scroll: Optional[Callable[[], None]] = None):
        if threshold_px < 0:
            raise ValueError("threshold_px must not be negative")
        self.threshold_px = threshold_px
        self.on_auto_scroll = on_auto_scroll
        self._mode = FollowMode.FOLLOWING
        self._new_messages = False

    @property
    def mode(self) -> FollowMode:
        return self._mode

    @property
    def is_at_bottom(self) -> bool:
        return self._mode is FollowMode.FOLLOWING

    @property
    def new_messages_available(self) -> bool:
        return self._new_messages

    def distance_from_bottom(self, scroll_top: float, scroll_height: float, client_height: float) -> float:
        return scroll_height - scroll_top - client_height

    def sample(self, scroll_top: float, scroll_height: float, client_height: float) -> FollowMode:
        """Recompute the mode from a viewport scroll position."""
        distance = self.distance_from_bottom(scroll_top, scroll_height, client_height)
        if distance <= self.threshold_px:
            self._set_mode(FollowMode.FOLLOWING)
            self._new_messages = False
        else:
            self._set_mode(FollowMode.DETACHED)
        return self._mode

    def jump_to_latest(self) -> None:
        """Operator asked to resume following the tail."""
        self.force_follow()

    def force_follow(self) -> None:
        """Switch to FOLLOWING without a scroll sample and bring the tail into view."""
        self._set_mode(FollowMode.FOLLOWING)
        self._new_messages = False
        self._request_scroll()

    def on_append(self, entry: LogEntry) -> None:
        """LogBuffer subscriber."""
        if self._mode is FollowMode.FOLLOWING:
            self._request_scroll()
        else:
            self._new_messages = True

    def _set_mode(self, mode: FollowMode) -> None:
        if mode is not self._mode:
            logger.debug("Follow state %s -> %s", self._mode.value, mode.value)
            self._mode = mode

    def _request_scroll(self) -> None:
        if self.on_auto_scroll is not None:
            self.on_auto_scroll()
