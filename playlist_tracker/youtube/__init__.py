"""YouTube integration: API client and playlist catalog fetching."""

from .api_client import YouTubeAPIClient
from .catalog import CatalogFetcher, CatalogSource, create_catalog_fetcher
from .models import PlaylistCatalog, PlaylistMetadata, Video
from .proxy_client import ProxyCatalogFetcher

__all__ = [
    "YouTubeAPIClient",
    "CatalogFetcher",
    "CatalogSource",
    "ProxyCatalogFetcher",
    "create_catalog_fetcher",
    "PlaylistCatalog",
    "PlaylistMetadata",
    "Video",
]
