"""Data classes for YouTube playlist catalogs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.formatting import embed_url, format_iso_duration, parse_iso_duration


def parse_published_at(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp from the API ('2024-01-15T12:00:00Z')."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _format_published_at(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Video:
    """A playlist video with optional API fields already resolved."""

    id: str  # 11-character ID
    title: str
    thumbnail_url: str = ""
    duration_display: str = "0:00"
    description: str = ""
    channel_title: str = ""
    published_at: datetime | None = None
    duration_seconds: int = 0

    @property
    def url(self) -> str:
        """Get the watch URL for this video."""
        return f"https://www.youtube.com/watch?v={self.id}"

    @property
    def embed_url(self) -> str:
        """Get the embedded player URL for this video."""
        return embed_url(self.id)

    @classmethod
    def from_api_item(cls, item: dict) -> "Video | None":
        """Build a Video from a ``videos.list`` item, or None if it has no ID."""
        video_id = item.get("id")
        if not video_id:
            return None

        snippet = item.get("snippet") or {}
        content_details = item.get("contentDetails") or {}
        thumbnails = snippet.get("thumbnails") or {}
        thumbnail_url = (
            (thumbnails.get("medium") or {}).get("url")
            or (thumbnails.get("default") or {}).get("url")
            or ""
        )
        duration = content_details.get("duration") or "PT0S"

        return cls(
            id=video_id,
            title=snippet.get("title") or "Untitled video",
            thumbnail_url=thumbnail_url,
            duration_display=format_iso_duration(duration),
            description=snippet.get("description") or "",
            channel_title=snippet.get("channelTitle") or "",
            published_at=parse_published_at(snippet.get("publishedAt")),
            duration_seconds=parse_iso_duration(duration),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnail": self.thumbnail_url,
            "duration": self.duration_display,
            "durationSeconds": self.duration_seconds,
            "description": self.description,
            "channelTitle": self.channel_title,
            "publishedAt": _format_published_at(self.published_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Video":
        return cls(
            id=data["id"],
            title=data.get("title") or "Untitled video",
            thumbnail_url=data.get("thumbnail") or "",
            duration_display=data.get("duration") or "0:00",
            description=data.get("description") or "",
            channel_title=data.get("channelTitle") or "",
            published_at=parse_published_at(data.get("publishedAt")),
            duration_seconds=int(data.get("durationSeconds") or 0),
        )


@dataclass(frozen=True)
class PlaylistMetadata:
    """Playlist-level metadata from ``playlists.list``."""

    playlist_id: str
    title: str
    description: str = ""
    channel_title: str = ""

    @classmethod
    def from_api_item(cls, playlist_id: str, item: dict) -> "PlaylistMetadata":
        snippet = item.get("snippet") or {}
        return cls(
            playlist_id=playlist_id,
            title=snippet.get("title") or "Untitled playlist",
            description=snippet.get("description") or "",
            channel_title=snippet.get("channelTitle") or "",
        )


@dataclass(frozen=True)
class PlaylistCatalog:
    """A loaded playlist: metadata plus videos in playback order."""

    playlist_id: str
    title: str
    description: str = ""
    channel_title: str = ""
    videos: tuple[Video, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.videos)

    def index_of(self, video_id: str) -> int | None:
        """Position of the first video with this ID, or None."""
        for index, video in enumerate(self.videos):
            if video.id == video_id:
                return index
        return None

    @property
    def video_ids(self) -> list[str]:
        return [video.id for video in self.videos]

    @property
    def total_duration_seconds(self) -> int:
        return sum(video.duration_seconds for video in self.videos)

    def to_dict(self) -> dict[str, Any]:
        """Catalog payload shared by the web API and the catalog proxy."""
        return {
            "playlistId": self.playlist_id,
            "title": self.title,
            "description": self.description,
            "channelTitle": self.channel_title,
            "videos": [video.to_dict() for video in self.videos],
        }

    @classmethod
    def from_dict(cls, data: dict, playlist_id: str | None = None) -> "PlaylistCatalog":
        return cls(
            playlist_id=data.get("playlistId") or playlist_id or "",
            title=data.get("title") or "Untitled playlist",
            description=data.get("description") or "",
            channel_title=data.get("channelTitle") or "",
            videos=tuple(Video.from_dict(video) for video in data.get("videos") or []),
        )
