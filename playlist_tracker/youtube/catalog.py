"""Assemble a complete playlist catalog from the YouTube Data API.

The fetch runs three calls in sequence: playlist metadata, paginated playlist
membership, then batched video details. Membership order is the playback order.
"""

import logging
from typing import Optional, Protocol

from ..errors import ConfigurationError, EmptyPlaylistError, PlaylistNotFoundError
from .api_client import YouTubeAPIClient
from .models import PlaylistCatalog

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Anything that can turn a playlist ID into a catalog."""

    def fetch(self, playlist_id: str) -> PlaylistCatalog:
        ...


class CatalogFetcher:
    """Fetches catalogs directly from the YouTube Data API."""

    def __init__(self, api_key: str, client: Optional[YouTubeAPIClient] = None):
        """
        Args:
            api_key: YouTube Data API key. May be empty; the fetch then fails
                with ConfigurationError before any network call.
            client: Optional pre-built API client (used by tests).
        """
        self.api_key = api_key
        self._client = client

    @property
    def client(self) -> YouTubeAPIClient:
        if self._client is None:
            self._client = YouTubeAPIClient(api_key=self.api_key)
        return self._client

    def fetch(self, playlist_id: str) -> PlaylistCatalog:
        """
        Fetch a playlist and all of its videos.

        Args:
            playlist_id: YouTube playlist ID.

        Returns:
            PlaylistCatalog with videos in playlist order. Videos the API no
            longer returns details for are dropped.

        Raises:
            ConfigurationError: No API key is configured.
            PlaylistNotFoundError: The playlist does not exist or is private.
            UpstreamError: Any API call returned a non-success response.
            EmptyPlaylistError: No videos could be resolved.
        """
        if not self.api_key:
            raise ConfigurationError(
                "Missing YOUTUBE_API_KEY. Add it to your .env to fetch playlists."
            )

        logger.info(f"Fetching playlist: {playlist_id}")

        metadata = self.client.get_playlist(playlist_id)
        if metadata is None:
            raise PlaylistNotFoundError("Playlist not found or is private.")

        video_ids = self.client.get_playlist_video_ids(playlist_id)
        if not video_ids:
            raise EmptyPlaylistError("No videos found in this playlist.")

        details = self.client.get_videos(video_ids)

        videos = []
        for video_id in video_ids:
            video = details.get(video_id)
            if video is None:
                logger.debug(f"Dropping video {video_id}: no details returned")
                continue
            videos.append(video)

        if not videos:
            raise EmptyPlaylistError("No videos found in this playlist.")

        logger.info(
            f"Successfully fetched playlist {playlist_id} with {len(videos)} videos"
            f" ({len(video_ids) - len(videos)} unavailable)"
        )

        return PlaylistCatalog(
            playlist_id=playlist_id,
            title=metadata.title,
            description=metadata.description,
            channel_title=metadata.channel_title,
            videos=tuple(videos),
        )


def create_catalog_fetcher(config) -> CatalogSource:
    """
    Build the catalog source selected by configuration.

    Uses the catalog proxy when CATALOG_PROXY_URL is set, otherwise talks to
    the YouTube API directly with YOUTUBE_API_KEY.
    """
    if config.uses_proxy:
        from .proxy_client import ProxyCatalogFetcher

        logger.info(f"Fetching catalogs through proxy: {config.CATALOG_PROXY_URL}")
        return ProxyCatalogFetcher(
            proxy_url=config.CATALOG_PROXY_URL,
            timeout=config.CATALOG_PROXY_TIMEOUT,
        )
    return CatalogFetcher(api_key=config.YOUTUBE_API_KEY)
