"""Utility functions."""

import re

_VIDEO_ID = r"([a-zA-Z0-9_-]{11})"
_URL_PATTERNS = (
    re.compile(rf"(?:v=|/v/|youtu\.be/){_VIDEO_ID}"),
    re.compile(rf"(?:embed/|shorts/|live/){_VIDEO_ID}"),
)
_BARE_ID = re.compile(rf"^{_VIDEO_ID}$")


def extract_video_id(url_or_id: str) -> str | None:
    """Extract YouTube video ID from URL or return as-is if valid ID."""
    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group(1)
    match = _BARE_ID.match(url_or_id.strip())
    return match.group(1) if match else None


def format_timestamp(seconds: float) -> str:
    """Format seconds to HH:MM:SS or MM:SS."""
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_cue_time(seconds: float, separator: str = ".") -> str:
    """Format seconds as a subtitle cue time, HH:MM:SS.mmm."""
    millis = int(round(seconds * 1000))
    h, rem = divmod(millis, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d}{separator}{ms:03d}"
