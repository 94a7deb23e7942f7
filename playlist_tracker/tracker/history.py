"""Recently viewed playlists."""

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import List, Optional

from ..db.storage import KeyValueStorageInterface

logger = logging.getLogger(__name__)

HISTORY_KEY = "playlist-history"
DEFAULT_HISTORY_LIMIT = 5


@dataclass(frozen=True)
class PlaylistHistoryEntry:
    """A playlist the user loaded, for quick resume."""

    playlist_id: str
    title: str
    channel_title: str
    url: str
    viewed_at: datetime

    def to_dict(self) -> dict:
        return {
            "playlistId": self.playlist_id,
            "title": self.title,
            "channelTitle": self.channel_title,
            "url": self.url,
            "viewedAt": self.viewed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlaylistHistoryEntry":
        viewed_at = datetime.fromisoformat(data["viewedAt"].replace("Z", "+00:00"))
        if viewed_at.tzinfo is None:
            viewed_at = viewed_at.replace(tzinfo=UTC)
        return cls(
            playlist_id=data["playlistId"],
            title=data.get("title") or "",
            channel_title=data.get("channelTitle") or "",
            url=data.get("url") or "",
            viewed_at=viewed_at,
        )


class HistoryStore:
    """Most-recent-first list of playlists, at most ``limit`` long, with no duplicate IDs."""

    def __init__(self, storage: KeyValueStorageInterface, limit: int = DEFAULT_HISTORY_LIMIT):
        self.storage = storage
        self.limit = limit
        self._entries: List[PlaylistHistoryEntry] = self.load()

    def load(self) -> List[PlaylistHistoryEntry]:
        """
        Read history from storage.

        A missing or unreadable record yields an empty list; individual
        malformed entries are skipped.
        """
        raw = self.storage.get(HISTORY_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Failed to parse playlist history: {e}")
            return []
        if not isinstance(data, list):
            logger.warning("Failed to parse playlist history: expected a list")
            return []

        entries = []
        for item in data:
            try:
                entries.append(PlaylistHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed history entry: {e}")
        return entries[: self.limit]

    def entries(self) -> List[PlaylistHistoryEntry]:
        return list(self._entries)

    def get(self, playlist_id: str) -> Optional[PlaylistHistoryEntry]:
        for entry in self._entries:
            if entry.playlist_id == playlist_id:
                return entry
        return None

    def upsert(self, entry: PlaylistHistoryEntry) -> List[PlaylistHistoryEntry]:
        """Move or add ``entry`` to the front, evict the oldest past the limit, and save."""
        remaining = [item for item in self._entries if item.playlist_id != entry.playlist_id]
        self._entries = [entry, *remaining][: self.limit]
        self.storage.set(HISTORY_KEY, json.dumps([item.to_dict() for item in self._entries]))
        return self.entries()
