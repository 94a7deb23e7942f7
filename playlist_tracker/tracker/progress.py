"""Per-video watch progress, persisted on every change."""

import json
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable

from ..db.storage import KeyValueStorageInterface
from ..utils.formatting import progress_percent

logger = logging.getLogger(__name__)

PROGRESS_KEY = "youtube-playlist-progress"
DEFAULT_COMPLETION_THRESHOLD = 0.9


@dataclass(frozen=True)
class WatchProgress:
    """Last known position and completion state of one video."""

    video_id: str
    current_time: float = 0.0
    duration: float = 0.0
    completed: bool = False

    @property
    def percent(self) -> float:
        return progress_percent(self.current_time, self.duration)

    def to_dict(self) -> dict:
        return {
            "videoId": self.video_id,
            "currentTime": self.current_time,
            "duration": self.duration,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, video_id: str, data: dict) -> "WatchProgress":
        return cls(
            video_id=data.get("videoId") or video_id,
            current_time=float(data.get("currentTime") or 0),
            duration=float(data.get("duration") or 0),
            completed=bool(data.get("completed", False)),
        )


class ProgressStore:
    """
    Mapping of video ID to WatchProgress, mirrored to storage.

    Progress is shared across playlists and never deleted. Time-based updates
    can only set ``completed``; clearing it takes an explicit manual action.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        threshold: float = DEFAULT_COMPLETION_THRESHOLD,
    ):
        self.storage = storage
        self.threshold = threshold
        self._progress: Dict[str, WatchProgress] = self._load()

    def _load(self) -> Dict[str, WatchProgress]:
        raw = self.storage.get(PROGRESS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
        except ValueError as e:
            logger.warning(f"Ignoring unreadable watch progress record: {e}")
            return {}

        progress = {}
        for video_id, entry in data.items():
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed progress entry for {video_id}")
                continue
            try:
                progress[video_id] = WatchProgress.from_dict(video_id, entry)
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed progress entry for {video_id}: {e}")
        return progress

    def _save(self) -> None:
        payload = {video_id: entry.to_dict() for video_id, entry in self._progress.items()}
        self.storage.set(PROGRESS_KEY, json.dumps(payload))

    def _put(self, entry: WatchProgress) -> WatchProgress:
        self._progress[entry.video_id] = entry
        self._save()
        return entry

    def get(self, video_id: str) -> WatchProgress:
        """Progress for a video; a zeroed, not-completed record if none is stored."""
        return self._progress.get(video_id) or WatchProgress(video_id=video_id)

    def all(self) -> Dict[str, WatchProgress]:
        return dict(self._progress)

    def record_tick(self, video_id: str, current_time: float, duration: float) -> WatchProgress:
        """
        Record a playback sample.

        Overwrites the time fields and marks the video completed once more than
        ``threshold`` of it has been watched. A later sample below the
        threshold leaves an existing completion in place. Samples without a
        positive duration (player not ready yet) are ignored.
        """
        previous = self.get(video_id)
        if not duration or duration <= 0:
            return previous

        crossed = current_time / duration > self.threshold
        return self._put(
            WatchProgress(
                video_id=video_id,
                current_time=current_time,
                duration=duration,
                completed=previous.completed or crossed,
            )
        )

    def set_completed(self, video_id: str, value: bool) -> WatchProgress:
        """Explicitly set or clear completion, keeping the recorded position."""
        return self._put(replace(self.get(video_id), completed=value))

    def toggle_completed(self, video_id: str) -> WatchProgress:
        return self.set_completed(video_id, not self.get(video_id).completed)

    def mark_ended(self, video_id: str, duration: float) -> WatchProgress:
        """Record that playback reached the end of the video."""
        return self._put(
            WatchProgress(
                video_id=video_id,
                current_time=duration,
                duration=duration,
                completed=True,
            )
        )

    def completed_count(self, video_ids: Iterable[str]) -> int:
        return sum(1 for video_id in video_ids if self.get(video_id).completed)

    def playlist_percent(self, video_ids: Iterable[str]) -> float:
        """Share of the given videos that are completed, as a percentage."""
        ids = list(video_ids)
        if not ids:
            return 0.0
        return self.completed_count(ids) / len(ids) * 100
