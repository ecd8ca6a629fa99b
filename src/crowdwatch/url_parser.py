from __future__ import annotations

import re

# Recognized stream URL shapes, tried in order. The first match wins.
_ID = r"([A-Za-z0-9_-]+)"
_URL_PATTERNS = (
    # https://www.youtube.com/watch?v=ID (v may follow other query params)
    re.compile(r"^(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:[^#\s]*&)?v=" + _ID),
    # https://youtu.be/ID
    re.compile(r"^(?:https?://)?youtu\.be/" + _ID),
    # https://www.youtube.com/embed/ID
    re.compile(r"^(?:https?://)?(?:www\.)?youtube(?:-nocookie)?\.com/embed/" + _ID),
    # https://www.youtube.com/v/ID
    re.compile(r"^(?:https?://)?(?:www\.)?youtube\.com/v/" + _ID),
)


def parse_stream_url(raw: str) -> str | None:
    """
    Extract the video identifier from a streaming URL.

    This function is PURE (no logging, no state) so it can run on every
    keystroke. Returns None when no recognized shape matches.
    """
    text = (raw or "").strip()
    if not text:
        return None

    for pattern in _URL_PATTERNS:
        match = pattern.match(text)
        if match:
            return match.group(1)
    return None


def embed_url(video_id: str) -> str:
    """Build the playback URL for a parsed identifier."""
    return f"https://www.youtube.com/embed/{video_id}?autoplay=1&mute=1"
