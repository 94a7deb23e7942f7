"""Catalog fetcher that goes through a server-side catalog proxy.

The proxy takes ``{"playlistId": ...}`` and answers with the same catalog
payload the direct fetcher produces, or an ``{"error", "kind"}`` payload with
a non-success status.
"""

import logging

import httpx

from ..errors import UpstreamError, error_from_payload
from .models import PlaylistCatalog

logger = logging.getLogger(__name__)


class ProxyCatalogFetcher:
    """Fetches catalogs from a catalog proxy endpoint."""

    def __init__(self, proxy_url: str, timeout: float = 30.0, client: httpx.Client | None = None):
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._client = client

    def fetch(self, playlist_id: str) -> PlaylistCatalog:
        """
        Fetch a catalog through the proxy.

        Raises:
            CatalogError: The subclass named by the proxy's error payload;
                UpstreamError for transport failures or unknown payloads.
        """
        logger.info(f"Fetching playlist {playlist_id} via proxy")
        try:
            if self._client is not None:
                response = self._client.post(self.proxy_url, json={"playlistId": playlist_id})
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.proxy_url, json={"playlistId": playlist_id})
        except httpx.TimeoutException as e:
            logger.error(f"Catalog proxy timed out for {playlist_id}")
            raise UpstreamError("Catalog proxy timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Catalog proxy request failed for {playlist_id}: {e}")
            raise UpstreamError(f"Catalog proxy request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.is_success:
            if not isinstance(payload, dict):
                payload = {}
            raise error_from_payload(payload, status_code=response.status_code)

        if not isinstance(payload, dict) or "videos" not in payload:
            raise UpstreamError("Catalog proxy returned an invalid payload", status_code=response.status_code)

        return PlaylistCatalog.from_dict(payload, playlist_id=playlist_id)
