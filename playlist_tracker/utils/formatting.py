"""
Small parsing and formatting helpers for playlist URLs and video durations.
"""
import re
from typing import Iterator, List, Optional, Sequence

# ISO 8601 duration subset used by the YouTube API: PT#H#M#S
ISO_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
PLAYLIST_ID_PATTERN = re.compile(r"[?&]list=([^#&?]*)")


def _duration_parts(duration: Optional[str]) -> tuple[int, int, int]:
    if not duration:
        return 0, 0, 0
    match = ISO_DURATION_PATTERN.match(duration)
    if not match:
        return 0, 0, 0
    return (
        int(match.group(1) or 0),
        int(match.group(2) or 0),
        int(match.group(3) or 0),
    )


def format_iso_duration(duration: Optional[str]) -> str:
    """
    Convert an ISO 8601 duration into a display string.

    Args:
        duration: Duration string like 'PT1H2M3S'.

    Returns:
        'H:MM:SS' when the duration has hours, otherwise 'M:SS'.
        Malformed or empty input gives '0:00'.

    Examples:
        >>> format_iso_duration("PT1H2M3S")
        '1:02:03'
        >>> format_iso_duration("PT5M")
        '5:00'
        >>> format_iso_duration("garbage")
        '0:00'
    """
    hours, minutes, seconds = _duration_parts(duration)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def parse_iso_duration(duration: Optional[str]) -> int:
    """Parse an ISO 8601 duration to total seconds (0 if it does not parse)."""
    hours, minutes, seconds = _duration_parts(duration)
    return hours * 3600 + minutes * 60 + seconds


def extract_playlist_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the playlist ID from the first ``list=`` query parameter.

    The ID is not checked against YouTube.

    Args:
        url: Any URL-like string.

    Returns:
        The playlist ID, or None if the string has no (non-empty) list parameter.
    """
    if not url:
        return None
    match = PLAYLIST_ID_PATTERN.search(url)
    if not match or not match.group(1):
        return None
    return match.group(1)


def default_playlist_url(playlist_id: str) -> str:
    """Canonical watch-page URL for a playlist."""
    return f"https://www.youtube.com/playlist?list={playlist_id}"


def embed_url(video_id: str) -> str:
    """Embedded player URL with the JS API enabled."""
    return f"https://www.youtube.com/embed/{video_id}?autoplay=1&rel=0&enablejsapi=1"


def progress_percent(current: float, duration: float) -> float:
    """Watched percentage clamped to [0, 100]; 0 when the duration is unknown."""
    if not duration or duration <= 0:
        return 0.0
    return max(0.0, min(100.0, current / duration * 100))


def chunked(items: Sequence[str], size: int) -> Iterator[List[str]]:
    """Yield consecutive slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])
