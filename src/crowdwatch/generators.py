"""
Simulated telemetry sources.

These stand in for the camera feed and the people-counting model. They do
no I/O: the console drives them from its scheduler and pushes what they
produce through its inbound contract. All randomness comes from an injected
random.Random so tests can seed it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple

from .models import DensitySnapshot, Severity, ZoneCount


@dataclass(frozen=True)
class EventTemplate:
    message: str
    severity: Severity


# AI analysis narrative, emitted only while analysis is running.
NARRATIVE_EVENTS: Tuple[EventTemplate, ...] = (
    EventTemplate("Motion detected in Zone A", Severity.INFO),
    EventTemplate("Person entered restricted area", Severity.WARNING),
    EventTemplate("High density detected in Zone B", Severity.WARNING),
    EventTemplate("Crowd dispersing in Zone C", Severity.INFO),
    EventTemplate("Loitering detected near entrance", Severity.WARNING),
    EventTemplate("Unattended object flagged in Zone A", Severity.ERROR),
)

# System health, emitted regardless of analysis state.
HEALTH_EVENTS: Tuple[EventTemplate, ...] = (
    EventTemplate("System scan completed", Severity.INFO),
    EventTemplate("All systems operational", Severity.INFO),
    EventTemplate("Camera 3 offline", Severity.ERROR),
    EventTemplate("Storage usage above 80%", Severity.WARNING),
)


class EventGenerator:
    """Picks template messages uniformly from a fixed catalog."""

    def __init__(self, catalog: Sequence[EventTemplate], rng: Optional[random.Random] = None):
        if not catalog:
            raise ValueError("catalog must not be empty")
        self.catalog = tuple(catalog)
        self._rng = rng or random.Random()

    def next_event(self) -> EventTemplate:
        return self._rng.choice(self.catalog)


class OccupancyGenerator:
    """
    Per-zone occupancy draws.

    Each zone count is an independent draw in [0, bound). total_count is the
    sum of the same draw's zone counts, so a snapshot is always internally
    consistent.
    """

    def __init__(
        self,
        zones: Sequence[Tuple[str, int]],
        rng: Optional[random.Random] = None,
        capacity: int = 50,
    ):
        if not zones:
            raise ValueError("at least one zone is required")
        self.zones = tuple(zones)
        self.capacity = capacity
        self._rng = rng or random.Random()

    @property
    def zone_labels(self) -> Tuple[str, ...]:
        return tuple(label for label, _ in self.zones)

    def snapshot(self, taken_at: Optional[datetime] = None) -> DensitySnapshot:
        counts = tuple(
            ZoneCount(zone_label=label, count=self._rng.randrange(bound))
            for label, bound in self.zones
        )
        return DensitySnapshot(
            total_count=sum(zone.count for zone in counts),
            zones=counts,
            capacity=self.capacity,
            taken_at=taken_at,
        )
