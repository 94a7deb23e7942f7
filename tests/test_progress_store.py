"""Tests for the watch progress store."""

import json

import pytest

from playlist_tracker.tracker.progress import PROGRESS_KEY, ProgressStore, WatchProgress


@pytest.fixture
def progress(storage):
    return ProgressStore(storage)


def stored(storage):
    return json.loads(storage.get(PROGRESS_KEY))


class TestProgressStore:
    """Tests for ProgressStore."""

    def test_get_missing_is_zeroed(self, progress):
        assert progress.get("v1") == WatchProgress(video_id="v1")
        assert progress.all() == {}

    def test_threshold(self, progress):
        """Test 89% stays open, 91% completes, and a later 50% does not undo it."""
        assert progress.record_tick("v1", 89, 100).completed is False
        assert progress.record_tick("v1", 91, 100).completed is True

        record = progress.record_tick("v1", 50, 100)

        assert record.completed is True
        assert record.current_time == 50

    def test_exactly_ninety_percent_is_not_complete(self, progress):
        assert progress.record_tick("v1", 90, 100).completed is False

    def test_zero_duration_ignored(self, progress, storage):
        progress.record_tick("v1", 5, 0)
        assert progress.get("v1").current_time == 0
        assert storage.get(PROGRESS_KEY) is None

    def test_every_mutation_flushes(self, progress, storage):
        progress.record_tick("v1", 10, 100)
        assert stored(storage)["v1"] == {
            "videoId": "v1", "currentTime": 10, "duration": 100, "completed": False
        }

        progress.set_completed("v2", True)
        assert stored(storage)["v2"]["completed"] is True

    def test_manual_toggle_clears_completion(self, progress):
        """Test only a manual action can clear completion."""
        progress.record_tick("v1", 95, 100)

        record = progress.toggle_completed("v1")

        assert record.completed is False
        assert record.current_time == 95
        assert progress.record_tick("v1", 50, 100).completed is False

    def test_toggle_unknown_video(self, progress):
        assert progress.toggle_completed("new").completed is True
        assert progress.get("new").current_time == 0

    def test_mark_ended(self, progress):
        record = progress.mark_ended("v1", 212.5)
        assert record == WatchProgress("v1", current_time=212.5, duration=212.5, completed=True)

    def test_reload_from_storage(self, progress, storage):
        progress.record_tick("v1", 30, 60)
        progress.set_completed("v2", True)

        reloaded = ProgressStore(storage)

        assert reloaded.get("v1").current_time == 30
        assert reloaded.get("v2").completed is True

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '"text"'])
    def test_corrupt_record_is_empty(self, storage, raw):
        storage.set(PROGRESS_KEY, raw)
        assert ProgressStore(storage).all() == {}

    def test_malformed_entry_is_skipped(self, storage):
        """Test one bad entry does not cost the other videos their progress."""
        storage.set(PROGRESS_KEY, json.dumps({
            "good": {"videoId": "good", "currentTime": 95, "duration": 100, "completed": True},
            "bad": {"videoId": "bad", "currentTime": "n/a", "duration": 100},
            "odd": "not an object",
        }))

        store = ProgressStore(storage)
        store.record_tick("other", 1, 100)

        assert set(stored(storage)) == {"good", "other"}
        assert ProgressStore(storage).get("good").completed is True
        assert store.get("bad") == WatchProgress(video_id="bad")

    def test_playlist_percent(self, progress):
        progress.set_completed("a", True)
        progress.record_tick("b", 10, 100)

        assert progress.completed_count(["a", "b", "c", "d"]) == 1
        assert progress.playlist_percent(["a", "b", "c", "d"]) == 25.0
        assert progress.playlist_percent([]) == 0.0

    def test_custom_threshold(self, storage):
        progress = ProgressStore(storage, threshold=0.5)
        assert progress.record_tick("v1", 51, 100).completed is True

    def test_percent_property(self):
        assert WatchProgress("v", current_time=30, duration=120).percent == 25.0
