"""Player controller: tracks playback of the active video.

States run Idle -> Loading -> Playing <-> Paused -> Ended. While playing, the
position is sampled on a fixed interval and recorded in the progress store.
When a video ends it is marked completed and, after a short delay, the
``on_advance`` callback is asked to move on.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Protocol, Union

from .progress import ProgressStore
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class PlayerState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class PlayerEvent(str, Enum):
    """State-change notifications from the embedded player."""

    UNSTARTED = "unstarted"
    ENDED = "ended"
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    CUED = "cued"

    @classmethod
    def parse(cls, value: Union[str, int, "PlayerEvent"]) -> "PlayerEvent":
        """Accept an event name or the IFrame API's numeric YT.PlayerState code."""
        if isinstance(value, PlayerEvent):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return _EVENT_CODES[value]
            except KeyError:
                raise ValueError(f"Unknown player state code: {value}") from None
        return cls(str(value).lower())


# YT.PlayerState values
_EVENT_CODES = {
    -1: PlayerEvent.UNSTARTED,
    0: PlayerEvent.ENDED,
    1: PlayerEvent.PLAYING,
    2: PlayerEvent.PAUSED,
    3: PlayerEvent.BUFFERING,
    5: PlayerEvent.CUED,
}


class EmbeddedPlayer(Protocol):
    """Playback surface for one video."""

    video_id: str

    def get_current_time(self) -> float:
        ...

    def get_duration(self) -> float:
        ...


class RemotePlayer:
    """Embedded player that lives in a browser and reports its position to us."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        self.current_time = 0.0
        self.duration = 0.0

    def update(self, current_time: Optional[float] = None, duration: Optional[float] = None) -> None:
        if current_time is not None:
            self.current_time = max(0.0, float(current_time))
        if duration is not None:
            self.duration = max(0.0, float(duration))

    def get_current_time(self) -> float:
        return self.current_time

    def get_duration(self) -> float:
        return self.duration


class _Binding:
    """The controller's hold on one video; replaced wholesale on every load."""

    def __init__(self, video_id: str, player: EmbeddedPlayer):
        self.video_id = video_id
        self.player = player
        self.poll: Optional[TimerHandle] = None
        self.advance: Optional[TimerHandle] = None

    def stop_polling(self) -> None:
        if self.poll is not None:
            self.poll.cancel()
            self.poll = None

    def release(self) -> None:
        self.stop_polling()
        if self.advance is not None:
            self.advance.cancel()
            self.advance = None


class PlayerController:
    """Drives progress tracking for whichever video is currently loaded."""

    def __init__(
        self,
        progress: ProgressStore,
        scheduler: Scheduler,
        on_advance: Callable[[str], None],
        poll_interval: float = 1.0,
        advance_delay: float = 1.0,
    ):
        """
        Args:
            progress: Store that receives samples and end-of-video marks.
            scheduler: Timer source.
            on_advance: Called with the ended video's ID once ``advance_delay``
                has passed, unless the video was switched away from first.
            poll_interval: Seconds between position samples while playing.
            advance_delay: Seconds between end-of-video and ``on_advance``.
        """
        self.progress = progress
        self.scheduler = scheduler
        self.on_advance = on_advance
        self.poll_interval = poll_interval
        self.advance_delay = advance_delay
        self.state = PlayerState.IDLE
        self._binding: Optional[_Binding] = None

    @property
    def video_id(self) -> Optional[str]:
        return self._binding.video_id if self._binding else None

    @property
    def player(self) -> Optional[EmbeddedPlayer]:
        return self._binding.player if self._binding else None

    @property
    def is_polling(self) -> bool:
        return self._binding is not None and self._binding.poll is not None

    def load(self, video_id: str, player: EmbeddedPlayer) -> None:
        """Tear down the current binding and bind to a newly selected video."""
        self._teardown()
        self.state = PlayerState.IDLE
        self._binding = _Binding(video_id, player)
        self.state = PlayerState.LOADING
        logger.debug(f"Player loading video {video_id}")

    def unload(self) -> None:
        self._teardown()
        self.state = PlayerState.IDLE

    def handle_event(self, event: Union[str, int, PlayerEvent]) -> PlayerState:
        """Apply a state-change notification from the embedded player."""
        event = PlayerEvent.parse(event)
        binding = self._binding
        if binding is None:
            logger.debug(f"Ignoring player event {event.value}: no video loaded")
            return self.state

        if event is PlayerEvent.PLAYING:
            if binding.poll is None:
                binding.poll = self.scheduler.call_every(
                    self.poll_interval, lambda: self._sample(binding)
                )
            self.state = PlayerState.PLAYING
            return self.state

        binding.stop_polling()

        if event is PlayerEvent.ENDED:
            duration = binding.player.get_duration() or 0.0
            self.progress.mark_ended(binding.video_id, duration)
            self.state = PlayerState.ENDED
            if binding.advance is not None:
                binding.advance.cancel()
            binding.advance = self.scheduler.call_later(
                self.advance_delay, lambda: self._advance(binding)
            )
        elif event is PlayerEvent.PAUSED or self.state is PlayerState.PLAYING:
            self.state = PlayerState.PAUSED

        return self.state

    def _sample(self, binding: _Binding) -> None:
        if binding is not self._binding:
            logger.debug(f"Dropping stale progress sample for {binding.video_id}")
            return
        player = binding.player
        self.progress.record_tick(
            binding.video_id, player.get_current_time(), player.get_duration()
        )

    def _advance(self, binding: _Binding) -> None:
        if binding is not self._binding:
            logger.debug(f"Dropping stale auto-advance for {binding.video_id}")
            return
        binding.advance = None
        self.on_advance(binding.video_id)

    def _teardown(self) -> None:
        if self._binding is not None:
            self._binding.release()
            self._binding = None
