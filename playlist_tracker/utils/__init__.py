"""Utility modules for the playlist tracker."""

from .formatting import (
    chunked,
    default_playlist_url,
    embed_url,
    extract_playlist_id,
    format_iso_duration,
    parse_iso_duration,
    progress_percent,
)

__all__ = [
    'chunked',
    'default_playlist_url',
    'embed_url',
    'extract_playlist_id',
    'format_iso_duration',
    'parse_iso_duration',
    'progress_percent',
]
