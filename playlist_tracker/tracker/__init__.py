"""Watch-progress tracking: stores, player controller and viewer session."""

from .history import HistoryStore, PlaylistHistoryEntry
from .player import EmbeddedPlayer, PlayerController, PlayerEvent, PlayerState, RemotePlayer
from .progress import ProgressStore, WatchProgress
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle
from .session import Notification, ViewerSession

__all__ = [
    "HistoryStore",
    "PlaylistHistoryEntry",
    "EmbeddedPlayer",
    "PlayerController",
    "PlayerEvent",
    "PlayerState",
    "RemotePlayer",
    "ProgressStore",
    "WatchProgress",
    "AsyncioScheduler",
    "Scheduler",
    "TimerHandle",
    "Notification",
    "ViewerSession",
]
