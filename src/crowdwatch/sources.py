"""
Media source selection and the analysis gate.

The operator picks either a streaming URL or an uploaded video file.
Analysis may only start from a source that validates; stopping keeps the
source so the same one can be restarted.
"""

from __future__ import annotations

import io
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import SourceValidationError
from .models import AnalysisState, MediaSource, NoSource, RemoteUrl, UploadedFile

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 100 * 1024 * 1024
_MIB = 1024 * 1024


def _format_limit(limit_bytes: int) -> str:
    if limit_bytes >= _MIB and limit_bytes % _MIB == 0:
        return f"{limit_bytes // _MIB}MB"
    return f"{limit_bytes} bytes"


class MediaHandle:
    """
    Scoped in-memory handle to uploaded video bytes.

    Must be released when the file is replaced, cleared, or the console is
    torn down. Reading after release is an error.
    """

    def __init__(self, data: bytes, file_name: str):
        self.file_name = file_name
        self.uri = f"media://{uuid.uuid4().hex}"
        self._buffer: Optional[io.BytesIO] = io.BytesIO(data)

    @property
    def released(self) -> bool:
        return self._buffer is None

    def read(self) -> bytes:
        if self._buffer is None:
            raise ValueError(f"Media handle {self.uri} has been released")
        return self._buffer.getvalue()

    def release(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
            logger.debug("Released media handle %s (%s)", self.uri, self.file_name)


class SourceSelector:
    """State machine over the selected MediaSource plus the AnalysisState."""

    def __init__(self, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        self.max_upload_bytes = max_upload_bytes
        self._source: MediaSource = NoSource()
        self._analysis = AnalysisState.IDLE

    @property
    def source(self) -> MediaSource:
        return self._source

    @property
    def analysis(self) -> AnalysisState:
        return self._analysis

    @property
    def running(self) -> bool:
        return self._analysis is AnalysisState.RUNNING

    def _ensure_idle(self, action: str) -> None:
        if self.running:
            raise SourceValidationError(f"Stop the analysis before you {action}")

    def select_remote(self, raw_input: str) -> RemoteUrl:
        """Store the URL text verbatim. Parsing happens whenever it is read."""
        self._ensure_idle("change the source")
        source = RemoteUrl(raw_input=raw_input)
        self._replace(source)
        return source

    def select_file(self, data: bytes, declared_type: str, size_bytes: int, file_name: str) -> UploadedFile:
        """
        Adopt an uploaded video file.

        Raises SourceValidationError (and keeps the previous source) when the
        declared type is not a video type or the file is over the size limit.
        """
        self._ensure_idle("change the source")
        if not (declared_type or "").lower().startswith("video/"):
            raise SourceValidationError("Please select a valid video file")
        if size_bytes > self.max_upload_bytes:
            raise SourceValidationError(f"File size must be less than {_format_limit(self.max_upload_bytes)}")

        source = UploadedFile(
            handle=MediaHandle(data, file_name),
            file_name=file_name,
            size_bytes=size_bytes,
            content_type=declared_type,
        )
        self._replace(source)
        return source

    def clear(self) -> None:
        self._ensure_idle("clear the source")
        self._replace(NoSource())

    def start(self) -> MediaSource:
        if self.running:
            raise SourceValidationError("Analysis is already running")

        source = self._source
        if isinstance(source, NoSource):
            raise SourceValidationError("Please enter a stream URL or upload a video file")
        if isinstance(source, RemoteUrl) and not source.is_valid:
            raise SourceValidationError("Please enter a valid stream URL")

        self._analysis = AnalysisState.RUNNING
        logger.info("Analysis running on %s", source.describe())
        return source

    def stop(self) -> bool:
        """Return to IDLE. Returns False if analysis was not running."""
        if not self.running:
            return False
        self._analysis = AnalysisState.IDLE
        logger.info("Analysis stopped")
        return True

    def close(self) -> None:
        """Stop and release any held file (console teardown)."""
        self._analysis = AnalysisState.IDLE
        self._replace(NoSource())

    def _replace(self, source: MediaSource) -> None:
        previous = self._source
        if isinstance(previous, UploadedFile) and previous is not source:
            previous.handle.release()
        self._source = source


def read_local_video(path: Union[str, Path], max_upload_bytes: int = MAX_UPLOAD_BYTES) -> Tuple[bytes, str, int]:
    """
    Load a video file from disk for `SourceSelector.select_file`.

    Returns (data, declared_type, size_bytes). The type is guessed from the
    file name. Files over the limit are not read; their data is empty so the
    selector rejects them on size. OSError propagates to the caller.
    """
    file_path = Path(path)
    size = file_path.stat().st_size
    declared_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    data = file_path.read_bytes() if size <= max_upload_bytes else b""
    return data, declared_type, size
