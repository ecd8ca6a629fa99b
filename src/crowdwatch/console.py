"""
Operator console - owns the activity log and every state machine around it.

All producers (simulated generators, operator actions, alerts) funnel their
log output through one LogBuffer. Timers come from an injected Scheduler and
are cancelled by close().
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, List, Optional, Union

from .alerts import CRITICAL_ALERT_MESSAGE, AlertController, manual_alert_message
from .config import ConsoleSettings
from .errors import ConsoleClosedError, SourceValidationError, ValidationError
from .follow import FollowStateTracker
from .generators import HEALTH_EVENTS, NARRATIVE_EVENTS, EventGenerator, OccupancyGenerator
from .log_buffer import LogBuffer
from .models import (
    AnalysisState,
    ConsoleSnapshot,
    DensitySnapshot,
    LogEntry,
    MediaSource,
    MediaSourceOut,
    Severity,
)
from .scheduler import Scheduler, TimerHandle
from .sources import SourceSelector, read_local_video

logger = logging.getLogger(__name__)

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class OperatorConsole:
    """
    Telemetry console for one operator session.

    Actions that can be rejected return True on success. On rejection they
    return False after appending exactly one error entry, and the console
    state is left as it was. After close() every action and inbound push
    raises ConsoleClosedError, so no new timer can be registered.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[ConsoleSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or ConsoleSettings()
        self.scheduler = scheduler
        self._rng = rng or random.Random(self.settings.random_seed)

        self.log = LogBuffer(capacity=self.settings.log_capacity, clock=scheduler.now)
        self.follow = FollowStateTracker(threshold_px=self.settings.follow_threshold_px)
        self.alert = AlertController(
            scheduler,
            duration=self.settings.alert_duration_sec,
            on_change=lambda _active: self._changed(),
        )
        self.sources = SourceSelector(max_upload_bytes=self.settings.max_upload_bytes)

        self.narrative = EventGenerator(NARRATIVE_EVENTS, self._rng)
        self.health = EventGenerator(HEALTH_EVENTS, self._rng)
        self.occupancy = OccupancyGenerator(
            list(zip(self.settings.zone_labels, self.settings.zone_bounds)),
            self._rng,
            capacity=self.settings.density_capacity,
        )

        self._density: Optional[DensitySnapshot] = None
        self._listeners: List[Callable[[], None]] = []
        self._analysis_timers: List[TimerHandle] = []
        self._closed = False

        # Follow tracker first so auto-scroll is decided before presentation redraws.
        self._unsubscribe = [
            self.log.subscribe(self.follow.on_append),
            self.log.subscribe(lambda _entry: self._changed()),
        ]
        self._health_timer = scheduler.call_every(self.settings.health_interval_sec, self._emit_health)

        logger.info("Operator console ready for %s", self.settings.operator_name)

    # ------------------------------------------------------------------
    # Inbound event contract
    # ------------------------------------------------------------------

    def push_event(self, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        self._ensure_open()
        return self._append(message, Severity(severity))

    def push_density(self, snapshot: DensitySnapshot) -> None:
        self._ensure_open()
        self._density = snapshot
        logger.debug("Density update: total=%s %s", snapshot.total_count, snapshot.describe_zones())
        self._changed()

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    def send_alert(self) -> LogEntry:
        """Log a manual alert. Does not touch the critical alert state."""
        self._ensure_open()
        return self._append(manual_alert_message(self.settings.operator_name), Severity.ERROR)

    def send_critical_alert(self) -> LogEntry:
        self._ensure_open()
        self.alert.trigger()
        self.follow.force_follow()
        return self._append(CRITICAL_ALERT_MESSAGE, Severity.ERROR)

    def send_chat_message(self, text: str) -> bool:
        self._ensure_open()
        if not (text or "").strip():
            return self._reject(ValidationError("Cannot send an empty message"))
        self._append(f"{self.settings.operator_name}: {text}", Severity.INFO)
        return True

    def select_remote_source(self, url: str) -> bool:
        self._ensure_open()
        try:
            self.sources.select_remote(url)
        except SourceValidationError as exc:
            return self._reject(exc)
        self._changed()
        return True

    def select_file_source(self, data: bytes, declared_type: str, size_bytes: int, file_name: str) -> bool:
        self._ensure_open()
        try:
            source = self.sources.select_file(data, declared_type, size_bytes, file_name)
        except SourceValidationError as exc:
            return self._reject(exc)
        logger.info("Adopted upload %s (%s bytes) as %s", file_name, size_bytes, source.handle.uri)
        self._changed()
        return True

    def select_local_file(self, path: Union[str, Path]) -> bool:
        """Adopt a video file from disk. An unreadable file becomes one error entry."""
        self._ensure_open()
        file_name = Path(path).name
        try:
            data, declared_type, size_bytes = read_local_video(path, self.settings.max_upload_bytes)
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return self._reject(ValidationError(f"Could not read {file_name}: {exc.strerror or exc}"))
        return self.select_file_source(data, declared_type, size_bytes, file_name)

    def clear_source(self) -> bool:
        self._ensure_open()
        try:
            self.sources.clear()
        except SourceValidationError as exc:
            return self._reject(exc)
        self._changed()
        return True

    def start_analysis(self) -> bool:
        self._ensure_open()
        try:
            source = self.sources.start()
        except SourceValidationError as exc:
            return self._reject(exc)

        self._append(f"Analysis started: {source.describe()}", Severity.INFO)
        self._append(
            "Monitoring zones initialized: " + ", ".join(self.occupancy.zone_labels),
            Severity.INFO,
        )
        self._analysis_timers = [
            self.scheduler.call_every(self.settings.narrative_interval_sec, self._emit_narrative),
            self.scheduler.call_every(self.settings.density_interval_sec, self._emit_density),
        ]
        return True

    def stop_analysis(self) -> bool:
        self._ensure_open()
        if not self.sources.stop():
            logger.debug("stop_analysis ignored: analysis is not running")
            return False
        self._cancel_analysis_timers()
        self._append("Analysis stopped", Severity.INFO)
        return True

    def scroll_sampled(self, scroll_top: float, scroll_height: float, client_height: float) -> bool:
        """Feed a viewport scroll position. Returns the new is_at_bottom flag."""
        self._ensure_open()
        before = (self.follow.mode, self.follow.new_messages_available)
        self.follow.sample(scroll_top, scroll_height, client_height)
        if (self.follow.mode, self.follow.new_messages_available) != before:
            self._changed()
        return self.follow.is_at_bottom

    def jump_to_latest(self) -> None:
        self._ensure_open()
        self.follow.jump_to_latest()
        self._changed()

    # ------------------------------------------------------------------
    # Outbound presentation contract
    # ------------------------------------------------------------------

    @property
    def entries(self):
        return self.log.entries()

    @property
    def is_at_bottom(self) -> bool:
        return self.follow.is_at_bottom

    @property
    def alert_active(self) -> bool:
        return self.alert.active

    @property
    def analysis_state(self) -> AnalysisState:
        return self.sources.analysis

    @property
    def media_source(self) -> MediaSource:
        return self.sources.source

    @property
    def density(self) -> Optional[DensitySnapshot]:
        return self._density

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> ConsoleSnapshot:
        return ConsoleSnapshot(
            operator_name=self.settings.operator_name,
            entries=list(self.log.entries()),
            is_at_bottom=self.follow.is_at_bottom,
            new_messages_available=self.follow.new_messages_available,
            alert_active=self.alert.active,
            alert_activated_at=self.alert.activated_at,
            analysis_state=self.sources.analysis,
            source=MediaSourceOut.from_source(self.sources.source),
            density=self._density,
        )

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call `callback` after any observable state change."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel every timer and release any held media (session end)."""
        if self._closed:
            return
        self._closed = True
        self._health_timer.cancel()
        self._cancel_analysis_timers()
        self.alert.close()
        self.sources.close()
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._listeners.clear()
        logger.info("Operator console closed")

    def __enter__(self) -> "OperatorConsole":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConsoleClosedError("Operator console is closed")

    def _append(self, message: str, severity: Severity) -> LogEntry:
        logger.log(_LEVELS[severity], "[console] %s", message)
        return self.log.append(message, severity)

    def _reject(self, exc: ValidationError) -> bool:
        self._append(str(exc), Severity.ERROR)
        return False

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _cancel_analysis_timers(self) -> None:
        for timer in self._analysis_timers:
            timer.cancel()
        self._analysis_timers = []

    def _emit_narrative(self) -> None:
        event = self.narrative.next_event()
        self.push_event(event.message, event.severity)

    def _emit_density(self) -> None:
        self.push_density(self.occupancy.snapshot(self.scheduler.now()))

    def _emit_health(self) -> None:
        event = self.health.next_event()
        self.push_event(event.message, event.severity)
