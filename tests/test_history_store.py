"""Tests for the playlist history store."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from playlist_tracker.tracker.history import HISTORY_KEY, HistoryStore, PlaylistHistoryEntry

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def entry(playlist_id, minutes=0, title=None):
    return PlaylistHistoryEntry(
        playlist_id=playlist_id,
        title=title or f"Playlist {playlist_id}",
        channel_title="Chan",
        url=f"https://www.youtube.com/playlist?list={playlist_id}",
        viewed_at=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def history(storage):
    return HistoryStore(storage)


class TestHistoryStore:
    """Tests for HistoryStore."""

    def test_empty(self, history):
        assert history.entries() == []

    def test_bounded_to_five(self, history):
        """Test six distinct playlists leave the five newest, newest first."""
        for i in range(6):
            history.upsert(entry(f"P{i}", minutes=i))

        assert [e.playlist_id for e in history.entries()] == ["P5", "P4", "P3", "P2", "P1"]

    def test_reupsert_moves_to_front(self, history):
        for i in range(3):
            history.upsert(entry(f"P{i}", minutes=i))

        result = history.upsert(entry("P0", minutes=10, title="Renamed"))

        assert [e.playlist_id for e in result] == ["P0", "P2", "P1"]
        assert result[0].title == "Renamed"
        assert result[0].viewed_at == BASE_TIME + timedelta(minutes=10)

    def test_upsert_flushes(self, history, storage):
        history.upsert(entry("P1"))

        data = json.loads(storage.get(HISTORY_KEY))

        assert data[0]["playlistId"] == "P1"
        assert data[0]["viewedAt"].startswith("2026-01-01T12:00:00")

    def test_load_round_trip(self, history, storage):
        history.upsert(entry("P1"))
        history.upsert(entry("P2", minutes=1))

        reloaded = HistoryStore(storage)

        assert [e.playlist_id for e in reloaded.entries()] == ["P2", "P1"]
        assert reloaded.get("P1").viewed_at == BASE_TIME

    @pytest.mark.parametrize("raw", ["{broken", '{"a": 1}', "42"])
    def test_corrupt_record_is_empty(self, storage, raw):
        storage.set(HISTORY_KEY, raw)
        assert HistoryStore(storage).entries() == []

    def test_malformed_entries_skipped(self, storage):
        good = entry("P1").to_dict()
        storage.set(HISTORY_KEY, json.dumps([{"title": "no id"}, good, "junk"]))

        assert [e.playlist_id for e in HistoryStore(storage).entries()] == ["P1"]

    def test_accepts_z_suffix_timestamps(self, storage):
        """Test records written as '...Z' (JavaScript toISOString) load."""
        storage.set(HISTORY_KEY, json.dumps([{
            "playlistId": "P1", "title": "T", "channelTitle": "C",
            "url": "u", "viewedAt": "2025-05-01T08:30:00.000Z",
        }]))

        loaded = HistoryStore(storage).get("P1")

        assert loaded.viewed_at == datetime(2025, 5, 1, 8, 30, tzinfo=UTC)

    def test_custom_limit(self, storage):
        history = HistoryStore(storage, limit=2)
        for i in range(4):
            history.upsert(entry(f"P{i}"))
        assert [e.playlist_id for e in history.entries()] == ["P3", "P2"]

    def test_get_missing(self, history):
        assert history.get("nope") is None
