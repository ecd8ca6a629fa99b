from __future__ import annotations

from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024
ZONE_COUNT = 3


class ConsoleSettings(BaseSettings):
    """
    Configuration for the operator console.
    """

    # Tell pydantic-settings to load environment variables from .env if present.
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # ignore unknown env vars
    )

    # --- Identity ---
    # Name used in manual alerts and chat messages.
    operator_name: str = "Operator"

    # --- Activity log ---
    log_capacity: int = 50
    # Pixels from the exact bottom that still count as "at bottom".
    follow_threshold_px: int = 10

    # --- Alerts ---
    alert_duration_sec: float = 5.0

    # --- Media sources ---
    max_upload_bytes: int = 100 * MIB

    # --- Simulated telemetry (seconds) ---
    narrative_interval_sec: float = 3.0  # AI narrative events, only while analysis runs
    density_interval_sec: float = 5.0  # occupancy snapshots, only while analysis runs
    health_interval_sec: float = 15.0  # system health events, always on

    zone_labels: List[str] = ["Zone A", "Zone B", "Zone C"]
    zone_bounds: List[int] = [15, 20, 10]
    density_capacity: int = 50

    # Seed for the simulated generators. None means nondeterministic.
    random_seed: Optional[int] = None

    # --- Logging ---
    log_level: str = "INFO"
    debug: bool = False

    # --- HTTP API ---
    http_host: str = "127.0.0.1"
    http_port: int = 8130

    @field_validator("follow_threshold_px")
    @classmethod
    def _threshold_in_range(cls, value: int) -> int:
        if not 0 <= value <= 20:
            raise ValueError("follow_threshold_px must be between 0 and 20")
        return value

    @field_validator("log_capacity", "max_upload_bytes", "density_capacity")
    @classmethod
    def _positive_int(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator(
        "alert_duration_sec",
        "narrative_interval_sec",
        "density_interval_sec",
        "health_interval_sec",
    )
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("interval must be positive")
        return value

    @model_validator(mode="after")
    def _zones_match(self) -> "ConsoleSettings":
        if len(self.zone_labels) != len(self.zone_bounds):
            raise ValueError("zone_labels and zone_bounds must have the same length")
        if len(self.zone_labels) != ZONE_COUNT:
            raise ValueError(f"exactly {ZONE_COUNT} zones are required")
        if any(bound < 1 for bound in self.zone_bounds):
            raise ValueError("zone_bounds must be positive")
        return self
