"""YouTube Data API v3 client."""

import json
import logging

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..errors import UpstreamError
from ..utils.formatting import chunked
from .models import PlaylistMetadata, Video

logger = logging.getLogger(__name__)

# Network failures raised from execute() before any HTTP response arrives
TRANSPORT_ERRORS = (httplib2.HttpLib2Error, OSError)

# YouTube API allows max 50 results per page and 50 IDs per videos.list call
MAX_PAGE_SIZE = 50
MAX_IDS_PER_REQUEST = 50


def upstream_error_from_http_error(error: HttpError) -> UpstreamError:
    """
    Convert a googleapiclient HttpError into an UpstreamError.

    Uses the API's own ``error.message`` when the response body carries one,
    falling back to a generic message with the HTTP status.
    """
    status = getattr(error.resp, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None

    message = None
    content = getattr(error, "content", b"") or b""
    try:
        body = json.loads(content.decode("utf-8") if isinstance(content, bytes) else content)
        if isinstance(body, dict):
            message = (body.get("error") or {}).get("message")
    except (ValueError, UnicodeDecodeError, AttributeError):
        message = None

    return UpstreamError(message or f"YouTube API error ({status})", status_code=status)


def upstream_error_from_transport_error(error: Exception) -> UpstreamError:
    """Convert a network failure (no HTTP response) into an UpstreamError."""
    return UpstreamError(f"YouTube API request failed: {error}")


class YouTubeAPIClient:
    """Client for the three read-only YouTube Data API v3 calls used by the tracker."""

    def __init__(self, api_key: str):
        """Initialize the YouTube API client.

        Args:
            api_key: YouTube Data API v3 key.
        """
        self.api_key = api_key
        self._youtube = None

    @property
    def youtube(self):
        """Lazy-load the YouTube API service."""
        if self._youtube is None:
            self._youtube = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)
        return self._youtube

    def get_playlist(self, playlist_id: str) -> PlaylistMetadata | None:
        """Get playlist metadata by ID.

        Args:
            playlist_id: YouTube playlist ID (PL... format).

        Returns:
            PlaylistMetadata if found, None if the playlist is missing or private.

        Raises:
            UpstreamError: The API returned a non-success response or could not be reached.
        """
        try:
            response = (
                self.youtube.playlists()
                .list(part="snippet", id=playlist_id)
                .execute()
            )
        except HttpError as e:
            logger.error(f"YouTube API error fetching playlist {playlist_id}: {e}")
            raise upstream_error_from_http_error(e) from e
        except TRANSPORT_ERRORS as e:
            logger.error(f"YouTube API request failed for playlist {playlist_id}: {e}")
            raise upstream_error_from_transport_error(e) from e

        items = response.get("items") or []
        if not items:
            return None

        return PlaylistMetadata.from_api_item(playlist_id, items[0])

    def get_playlist_video_ids(self, playlist_id: str) -> list[str]:
        """Get the ordered video IDs of a playlist, following every page.

        Args:
            playlist_id: YouTube playlist ID.

        Returns:
            Video IDs in playlist order (pages concatenated as returned).

        Raises:
            UpstreamError: Any page request failed.
        """
        video_ids = []
        page_token = None

        while True:
            try:
                response = (
                    self.youtube.playlistItems()
                    .list(
                        part="snippet,contentDetails",
                        playlistId=playlist_id,
                        maxResults=MAX_PAGE_SIZE,
                        pageToken=page_token,
                    )
                    .execute()
                )
            except HttpError as e:
                logger.error(f"YouTube API error fetching items for playlist {playlist_id}: {e}")
                raise upstream_error_from_http_error(e) from e
            except TRANSPORT_ERRORS as e:
                logger.error(f"YouTube API request failed for items of playlist {playlist_id}: {e}")
                raise upstream_error_from_transport_error(e) from e

            for item in response.get("items") or []:
                video_id = self._item_video_id(item)
                if video_id:
                    video_ids.append(video_id)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Playlist {playlist_id} lists {len(video_ids)} videos")
        return video_ids

    def get_videos(self, video_ids: list[str]) -> dict[str, Video]:
        """Get details for many videos, batching the IDs.

        Args:
            video_ids: Video IDs; sent 50 per request, in order.

        Returns:
            Mapping of video ID to Video. IDs the API did not return (deleted
            or private videos) are absent.

        Raises:
            UpstreamError: Any batch request failed.
        """
        videos: dict[str, Video] = {}

        for batch_ids in chunked(video_ids, MAX_IDS_PER_REQUEST):
            try:
                response = (
                    self.youtube.videos()
                    .list(part="contentDetails,snippet", id=",".join(batch_ids))
                    .execute()
                )
            except HttpError as e:
                logger.error(f"YouTube API error fetching video details: {e}")
                raise upstream_error_from_http_error(e) from e
            except TRANSPORT_ERRORS as e:
                logger.error(f"YouTube API request failed for video details: {e}")
                raise upstream_error_from_transport_error(e) from e

            for item in response.get("items") or []:
                video = Video.from_api_item(item)
                if video:
                    videos[video.id] = video

        return videos

    @staticmethod
    def _item_video_id(item: dict) -> str | None:
        """Video ID from a playlistItems entry (contentDetails first, then snippet)."""
        content_details = item.get("contentDetails") or {}
        snippet = item.get("snippet") or {}
        return content_details.get("videoId") or (snippet.get("resourceId") or {}).get("videoId")
