"""Playlist progress tracker for YouTube playlists."""

__version__ = "1.0.0"
