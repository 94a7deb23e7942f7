"""
Pytest configuration and fixtures for playlist-tracker tests.

This module runs before any test imports, setting up the test environment.
Environment variables are explicitly set to ensure deterministic test behavior
regardless of external environment configuration.
"""

import os

# Never talk to the real API or a real proxy from tests
os.environ["YOUTUBE_API_KEY"] = ""
os.environ["CATALOG_PROXY_URL"] = ""
os.environ["DATABASE_URL"] = "sqlite://"

import heapq
import itertools

import pytest

from playlist_tracker.db.storage import SQLAlchemyKeyValueStorage
from playlist_tracker.tracker.scheduler import Scheduler, TimerHandle
from playlist_tracker.youtube.models import PlaylistCatalog, Video


class ManualTimer(TimerHandle):
    def __init__(self, scheduler, due, callback, interval=None):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.interval = interval
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self):
        return self._cancelled


class ManualScheduler(Scheduler):
    """Deterministic scheduler: time only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def _push(self, timer):
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))

    def call_later(self, delay, callback):
        timer = ManualTimer(self, self.now + delay, callback)
        self._push(timer)
        return timer

    def call_every(self, interval, callback):
        timer = ManualTimer(self, self.now + interval, callback, interval=interval)
        self._push(timer)
        return timer

    @property
    def pending(self):
        """Number of live (not cancelled) timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
            if timer.interval is not None and not timer.cancelled:
                timer.due = due + timer.interval
                self._push(timer)
        self.now = target


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def storage():
    """In-memory SQLite storage."""
    store = SQLAlchemyKeyValueStorage("sqlite://")
    yield store
    store.close()


def make_video(video_id, title=None, duration="PT1M"):
    return Video(
        id=video_id,
        title=title or f"Video {video_id}",
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg",
        duration_display="1:00" if duration == "PT1M" else duration,
        channel_title="Test Channel",
        duration_seconds=60,
    )


def make_catalog(playlist_id="PLtest", count=3, title="Test Playlist"):
    return PlaylistCatalog(
        playlist_id=playlist_id,
        title=title,
        description="A test playlist",
        channel_title="Test Channel",
        videos=tuple(make_video(f"{playlist_id}-v{i}") for i in range(1, count + 1)),
    )


class FakeFetcher:
    """Catalog source returning canned catalogs or raising canned errors."""

    def __init__(self, catalogs=None, errors=None):
        self.catalogs = catalogs or {}
        self.errors = errors or {}
        self.calls = []

    def fetch(self, playlist_id):
        self.calls.append(playlist_id)
        if playlist_id in self.errors:
            raise self.errors[playlist_id]
        return self.catalogs[playlist_id]
