from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from .errors import ConsoleClosedError
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

CRITICAL_ALERT_MESSAGE = "CRITICAL ALERT: Security breach detected! Immediate action required!"


def manual_alert_message(operator_name: str) -> str:
    return f"ALERT: Manual alert triggered by {operator_name}"


class AlertController:
    """
    Timed critical-alert state: CALM or CRITICAL.

    trigger() enters CRITICAL and schedules the return to CALM after
    `duration` seconds. Triggering again while CRITICAL replaces the pending
    timer, so the alert stays up until `duration` passes with no new trigger.
    There is no manual cancel.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        duration: float = 5.0,
        on_change: Optional[Callable[[bool], None]] = None,
    ):
        if duration <= 0:
            raise ValueError("duration must be positive")
        self._scheduler = scheduler
        self.duration = duration
        self.on_change = on_change

        self._activated_at: Optional[datetime] = None
        self._timer: Optional[TimerHandle] = None
        self._closed = False

    @property
    def active(self) -> bool:
        return self._activated_at is not None

    @property
    def activated_at(self) -> Optional[datetime]:
        return self._activated_at

    @property
    def deadline(self) -> Optional[datetime]:
        """When the alert will clear if not re-triggered."""
        if self._activated_at is None:
            return None
        return self._activated_at + timedelta(seconds=self.duration)

    def trigger(self) -> None:
        if self._closed:
            raise ConsoleClosedError("Alert controller is closed")
        was_active = self.active
        if self._timer is not None:
            self._timer.cancel()

        self._activated_at = self._scheduler.now()
        self._timer = self._scheduler.call_later(self.duration, self._expire)

        if was_active:
            logger.info("Critical alert re-triggered, clears at %s", self.deadline)
        else:
            logger.warning("Critical alert raised, clears at %s", self.deadline)
            self._notify()

    def _expire(self) -> None:
        self._timer = None
        self._activated_at = None
        logger.info("Critical alert cleared")
        self._notify()

    def close(self) -> None:
        """Cancel the pending deactivation and refuse further triggers (console teardown)."""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._activated_at = None

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.active)
