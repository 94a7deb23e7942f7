"""
Pydantic models for web API request/response validation.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..tracker.player import PlayerEvent


class FetchPlaylistRequest(BaseModel):
    """Request model for the catalog proxy endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    playlist_id: str = Field(
        ...,
        alias="playlistId",
        min_length=1,
        max_length=128,
        description="YouTube playlist ID",
    )

    @field_validator('playlist_id')
    @classmethod
    def validate_playlist_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Playlist ID is required')
        return v


class CatalogErrorResponse(BaseModel):
    """Error payload returned by the catalog proxy."""
    error: str = Field(..., description="Human-readable error message")
    kind: str = Field(..., description="Error kind: configuration, not_found, upstream, empty_playlist")


class VideoPayload(BaseModel):
    """A single video in a catalog payload."""
    id: str
    title: str
    thumbnail: str = ""
    duration: str = "0:00"
    durationSeconds: int = 0
    description: str = ""
    channelTitle: str = ""
    publishedAt: str = ""


class CatalogResponse(BaseModel):
    """Catalog payload (used for documentation and validation)."""
    playlistId: str
    title: str
    description: str = ""
    channelTitle: str = ""
    videos: List[VideoPayload] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "playlistId": "PLabc123",
                "title": "Intro to Python",
                "description": "",
                "channelTitle": "Teaching Channel",
                "videos": [
                    {
                        "id": "abc123def45",
                        "title": "Lesson 1",
                        "thumbnail": "https://i.ytimg.com/vi/abc123def45/mqdefault.jpg",
                        "duration": "12:04",
                        "durationSeconds": 724,
                        "description": "",
                        "channelTitle": "Teaching Channel",
                        "publishedAt": "2024-01-15T12:00:00Z",
                    }
                ],
            }
        }
    )


# --- Viewer action models ---


class InputRequest(BaseModel):
    """Update the playlist URL input box."""
    text: str = Field(default="", max_length=2048)


class LoadPlaylistRequest(BaseModel):
    """Load a playlist from a URL (or the current input text when omitted)."""
    url: Optional[str] = Field(default=None, max_length=2048, description="YouTube playlist URL")


class ResumePlaylistRequest(BaseModel):
    """Reload a playlist from history."""
    model_config = ConfigDict(populate_by_name=True)

    playlist_id: str = Field(..., alias="playlistId", min_length=1, max_length=128)


class SelectVideoRequest(BaseModel):
    """Select a video by catalog position."""
    index: int = Field(..., ge=0, description="Zero-based video index")


class ToggleCompletionRequest(BaseModel):
    """Toggle a video's completion mark."""
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(
        default=None, alias="videoId", description="Defaults to the current video"
    )


class PlayerEventRequest(BaseModel):
    """A state-change report from the embedded player."""
    model_config = ConfigDict(populate_by_name=True)

    event: Union[int, str] = Field(..., description="Event name or YT.PlayerState code")
    current_time: Optional[float] = Field(default=None, alias="currentTime", ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    video_id: Optional[str] = Field(default=None, alias="videoId")

    @field_validator('event')
    @classmethod
    def validate_event(cls, v):
        try:
            PlayerEvent.parse(v)
        except ValueError as e:
            raise ValueError(f"Unknown player event: {v}") from e
        return v


class WatchProgressResponse(BaseModel):
    """Watch progress for one video."""
    videoId: str
    currentTime: float
    duration: float
    completed: bool
