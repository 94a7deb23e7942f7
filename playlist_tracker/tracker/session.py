"""Viewer session: the state behind the playlist viewer page.

The session owns the loaded catalog, the current selection and transient UI
state (input text, loading flag, nav bar visibility, last notification). Durable
state lives in the progress and history stores it is given.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any, Dict, Optional

from ..errors import CatalogError
from ..utils.formatting import default_playlist_url, extract_playlist_id
from ..youtube.catalog import CatalogSource
from ..youtube.models import PlaylistCatalog, Video
from .history import HistoryStore, PlaylistHistoryEntry
from .player import PlayerController, PlayerEvent, RemotePlayer
from .progress import ProgressStore
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A user-facing message about the outcome of an action."""

    title: str
    description: str = ""
    variant: str = "default"  # "default" or "destructive"


class ViewerSession:
    """Dispatches viewer actions into the stores and the player controller."""

    def __init__(
        self,
        fetcher: CatalogSource,
        progress: ProgressStore,
        history: HistoryStore,
        scheduler: Scheduler,
        poll_interval: float = 1.0,
        advance_delay: float = 1.0,
        nav_hide_delay: float = 4.0,
    ):
        self.fetcher = fetcher
        self.progress = progress
        self.history = history
        self.scheduler = scheduler
        self.nav_hide_delay = nav_hide_delay
        self.controller = PlayerController(
            progress=progress,
            scheduler=scheduler,
            on_advance=self._auto_advance,
            poll_interval=poll_interval,
            advance_delay=advance_delay,
        )

        self.input_text = ""
        self.is_loading = False
        self.catalog: Optional[PlaylistCatalog] = None
        self.current_index = 0
        self.nav_visible = True
        self.last_notification: Optional[Notification] = None

        self._fetch_generation = 0
        self._nav_timer: Optional[TimerHandle] = None

    # --- Loading ---

    def set_input(self, text: str) -> None:
        self.input_text = text

    async def load_by_url(self, url: Optional[str] = None) -> Optional[Notification]:
        """Load the playlist named by ``url`` (or the current input text)."""
        if url is not None:
            self.input_text = url
        text = self.input_text.strip()

        if not text:
            return self._notify(
                "Please enter a playlist URL",
                "Paste a YouTube playlist URL to get started",
                destructive=True,
            )

        playlist_id = extract_playlist_id(text)
        if not playlist_id:
            return self._notify(
                "Invalid playlist URL",
                "Please enter a valid YouTube playlist URL",
                destructive=True,
            )

        return await self.load_playlist(playlist_id, text)

    async def resume(self, playlist_id: str) -> Optional[Notification]:
        """Reload a playlist from history."""
        entry = self.history.get(playlist_id)
        if entry is None:
            return self._notify(
                "Playlist not in history",
                f"No recent playlist with ID {playlist_id}",
                destructive=True,
            )
        self.input_text = entry.url
        return await self.load_playlist(entry.playlist_id, entry.url)

    async def load_playlist(self, playlist_id: str, source_url: Optional[str] = None) -> Optional[Notification]:
        """
        Fetch a playlist and make it the current catalog.

        A newer load started before this one finishes supersedes it; the
        older result is discarded and None is returned. On failure the
        previously loaded catalog stays in place.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        self.is_loading = True

        try:
            catalog = await asyncio.to_thread(self.fetcher.fetch, playlist_id)
        except CatalogError as e:
            if generation != self._fetch_generation:
                logger.debug(f"Discarding error from superseded fetch of {playlist_id}: {e}")
                return None
            logger.error(f"Error fetching playlist {playlist_id}: {e}")
            return self._notify("Failed to load playlist", e.message, destructive=True)
        finally:
            if generation == self._fetch_generation:
                self.is_loading = False

        if generation != self._fetch_generation:
            logger.debug(f"Discarding superseded fetch of {playlist_id}")
            return None

        self.catalog = catalog
        self.select(0)
        self.history.upsert(
            PlaylistHistoryEntry(
                playlist_id=playlist_id,
                title=catalog.title,
                channel_title=catalog.channel_title,
                url=source_url or default_playlist_url(playlist_id),
                viewed_at=datetime.now(UTC),
            )
        )
        return self._notify("Playlist loaded successfully!", f"Found {len(catalog)} videos")

    # --- Navigation ---

    @property
    def current_video(self) -> Optional[Video]:
        if self.catalog is None or not self.catalog.videos:
            return None
        return self.catalog.videos[self.current_index]

    @property
    def can_go_previous(self) -> bool:
        return self.catalog is not None and self.current_index > 0

    @property
    def can_go_next(self) -> bool:
        return self.catalog is not None and self.current_index < len(self.catalog) - 1

    def select(self, index: int) -> Video:
        """Make the video at ``index`` current and rebind the player to it."""
        if self.catalog is None:
            raise IndexError("No playlist loaded")
        if not 0 <= index < len(self.catalog):
            raise IndexError(f"Video index {index} out of range (0-{len(self.catalog) - 1})")

        self.current_index = index
        video = self.catalog.videos[index]
        self.controller.load(video.id, RemotePlayer(video.id))
        return video

    def next(self) -> Optional[Video]:
        """Mark the current video done and move to the next one."""
        if not self.can_go_next:
            return None
        self.progress.set_completed(self.current_video.id, True)
        return self.select(self.current_index + 1)

    def previous(self) -> Optional[Video]:
        if not self.can_go_previous:
            return None
        return self.select(self.current_index - 1)

    def go_home(self) -> None:
        self.controller.unload()
        self.catalog = None
        self.input_text = ""
        self.current_index = 0

    def _auto_advance(self, ended_video_id: str) -> None:
        video = self.current_video
        if video is None or video.id != ended_video_id:
            return
        if self.can_go_next:
            self.select(self.current_index + 1)

    # --- Progress ---

    def toggle_completion(self, video_id: Optional[str] = None) -> bool:
        """Flip the completion mark of a video (the current one by default)."""
        if video_id is None:
            video = self.current_video
            if video is None:
                raise IndexError("No video selected")
            video_id = video.id
        return self.progress.toggle_completed(video_id).completed

    def player_event(
        self,
        event,
        current_time: Optional[float] = None,
        duration: Optional[float] = None,
        video_id: Optional[str] = None,
    ) -> None:
        """Apply a report from the browser's embedded player."""
        if video_id is not None and video_id != self.controller.video_id:
            logger.debug(f"Ignoring player event for inactive video {video_id}")
            return
        player = self.controller.player
        if isinstance(player, RemotePlayer):
            player.update(current_time, duration)
        self.controller.handle_event(PlayerEvent.parse(event))

    # --- Transient UI state ---

    def register_activity(self) -> None:
        """Show the nav bar and hide it again after a quiet period."""
        self.nav_visible = True
        if self._nav_timer is not None:
            self._nav_timer.cancel()
        self._nav_timer = self.scheduler.call_later(self.nav_hide_delay, self._hide_nav)

    def _hide_nav(self) -> None:
        self.nav_visible = False
        self._nav_timer = None

    def _notify(self, title: str, description: str = "", destructive: bool = False) -> Notification:
        self.last_notification = Notification(
            title=title,
            description=description,
            variant="destructive" if destructive else "default",
        )
        return self.last_notification

    def close(self) -> None:
        """Cancel every pending timer."""
        self.controller.unload()
        if self._nav_timer is not None:
            self._nav_timer.cancel()
            self._nav_timer = None

    def snapshot(self) -> Dict[str, Any]:
        """Everything the viewer page renders, as plain data."""
        state: Dict[str, Any] = {
            "inputText": self.input_text,
            "isLoading": self.is_loading,
            "navVisible": self.nav_visible,
            "notification": asdict(self.last_notification) if self.last_notification else None,
            "history": [entry.to_dict() for entry in self.history.entries()],
            "playerState": self.controller.state.value,
            "playlist": None,
        }
        if self.catalog is None:
            return state

        catalog = self.catalog
        videos = []
        for index, video in enumerate(catalog.videos):
            progress = self.progress.get(video.id)
            videos.append({
                "index": index,
                "id": video.id,
                "title": video.title,
                "thumbnail": video.thumbnail_url,
                "duration": video.duration_display,
                "channelTitle": video.channel_title,
                "active": index == self.current_index,
                "completed": progress.completed,
                "percent": round(progress.percent, 1),
            })

        current = self.current_video
        state["playlist"] = {
            "playlistId": catalog.playlist_id,
            "title": catalog.title,
            "description": catalog.description,
            "channelTitle": catalog.channel_title,
            "progressPercent": round(self.progress.playlist_percent(catalog.video_ids)),
            "videos": videos,
            "currentIndex": self.current_index,
            "position": f"Video {self.current_index + 1} of {len(catalog)}",
            "canPrevious": self.can_go_previous,
            "canNext": self.can_go_next,
            "current": {
                **current.to_dict(),
                "embedUrl": current.embed_url,
                "completed": self.progress.get(current.id).completed,
            } if current else None,
        }
        return state
