"""
Data model for the operator console.

LogEntry and DensitySnapshot are immutable pydantic models so they can be
handed to the presentation layer and serialized by the HTTP API as-is.
Media sources are plain frozen dataclasses because one of them carries a
live resource handle.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .url_parser import parse_stream_url

if TYPE_CHECKING:
    from .sources import MediaHandle


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AnalysisState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class FollowMode(str, Enum):
    FOLLOWING = "following"
    DETACHED = "detached"


class LogEntry(BaseModel):
    """
    One record in the operator-facing activity feed.

    ids are assigned by LogBuffer and strictly increase in insertion order.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    message: str
    timestamp: datetime
    severity: Severity


class ZoneCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    zone_label: str
    count: int


class DensitySnapshot(BaseModel):
    """Simulated occupancy reading for every monitored zone."""
    model_config = ConfigDict(frozen=True)

    total_count: int
    zones: Tuple[ZoneCount, ...]
    capacity: int = 50
    taken_at: Optional[datetime] = None

    def describe_zones(self) -> List[str]:
        """Return "Zone A: 8" style labels, in zone order."""
        return [f"{zone.zone_label}: {zone.count}" for zone in self.zones]


@dataclass(frozen=True)
class NoSource:
    kind = "none"

    def describe(self) -> str:
        return "no source"


@dataclass(frozen=True)
class RemoteUrl:
    """
    A streaming URL typed by the operator.

    The raw text is kept verbatim and parsed on every read, since the
    operator may still be typing when the source is inspected.
    """
    raw_input: str
    kind = "remote_url"

    @property
    def parsed_id(self) -> Optional[str]:
        return parse_stream_url(self.raw_input)

    @property
    def is_valid(self) -> bool:
        return self.parsed_id is not None

    def describe(self) -> str:
        return f"stream {self.parsed_id}" if self.is_valid else f"stream {self.raw_input!r}"


@dataclass(frozen=True)
class UploadedFile:
    handle: "MediaHandle"
    file_name: str
    size_bytes: int
    content_type: str
    kind = "uploaded_file"

    def describe(self) -> str:
        return f"file {self.file_name}"


MediaSource = Union[NoSource, RemoteUrl, UploadedFile]


class MediaSourceOut(BaseModel):
    """Discriminated, serializable view of the selected media source."""
    kind: str
    raw_input: Optional[str] = None
    parsed_id: Optional[str] = None
    file_name: Optional[str] = None
    size_bytes: Optional[int] = None
    content_type: Optional[str] = None
    media_uri: Optional[str] = None

    @classmethod
    def from_source(cls, source: MediaSource) -> "MediaSourceOut":
        if isinstance(source, RemoteUrl):
            return cls(kind=source.kind, raw_input=source.raw_input, parsed_id=source.parsed_id)
        if isinstance(source, UploadedFile):
            return cls(
                kind=source.kind,
                file_name=source.file_name,
                size_bytes=source.size_bytes,
                content_type=source.content_type,
                media_uri=source.handle.uri,
            )
        return cls(kind=source.kind)


class ConsoleSnapshot(BaseModel):
    """Read-only view of the console consumed by presentation layers."""
    operator_name: str
    entries: List[LogEntry] = Field(default_factory=list)
    is_at_bottom: bool = True
    new_messages_available: bool = False
    alert_active: bool = False
    alert_activated_at: Optional[datetime] = None
    analysis_state: AnalysisState = AnalysisState.IDLE
    source: MediaSourceOut
    density: Optional[DensitySnapshot] = None
