"""Tests for the catalog proxy client."""

import json

import httpx
import pytest

from playlist_tracker.errors import (
    ConfigurationError,
    EmptyPlaylistError,
    PlaylistNotFoundError,
    UpstreamError,
)
from playlist_tracker.youtube.proxy_client import ProxyCatalogFetcher

from conftest import make_catalog

PROXY_URL = "https://proxy.example.com/fetch"


def fetcher_for(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ProxyCatalogFetcher(PROXY_URL, client=client)


class TestProxyCatalogFetcher:
    """Tests for ProxyCatalogFetcher."""

    def test_success(self):
        """Test the catalog payload round-trips through the proxy."""
        catalog = make_catalog("PLp", count=2)
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=catalog.to_dict())

        result = fetcher_for(handler).fetch("PLp")

        assert seen["body"] == {"playlistId": "PLp"}
        assert result.video_ids == catalog.video_ids
        assert result.title == catalog.title

    @pytest.mark.parametrize(
        "status,kind,error_cls",
        [
            (500, "configuration", ConfigurationError),
            (404, "not_found", PlaylistNotFoundError),
            (502, "upstream", UpstreamError),
            (422, "empty_playlist", EmptyPlaylistError),
        ],
    )
    def test_error_kinds(self, status, kind, error_cls):
        def handler(request):
            return httpx.Response(status, json={"error": "boom", "kind": kind})

        with pytest.raises(error_cls, match="boom"):
            fetcher_for(handler).fetch("PL1")

    def test_error_without_kind(self):
        """Test the original proxy shape (error only, status 500)."""
        def handler(request):
            return httpx.Response(500, json={"error": "YouTube API key not configured"})

        with pytest.raises(UpstreamError) as exc_info:
            fetcher_for(handler).fetch("PL1")

        assert exc_info.value.status_code == 500
        assert "not configured" in exc_info.value.message

    def test_non_json_error(self):
        def handler(request):
            return httpx.Response(503, text="Service Unavailable")

        with pytest.raises(UpstreamError, match="503"):
            fetcher_for(handler).fetch("PL1")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError, match="request failed"):
            fetcher_for(handler).fetch("PL1")

    def test_invalid_success_payload(self):
        def handler(request):
            return httpx.Response(200, json={"unexpected": True})

        with pytest.raises(UpstreamError, match="invalid payload"):
            fetcher_for(handler).fetch("PL1")
