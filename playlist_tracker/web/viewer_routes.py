"""API routes for the playlist viewer.

Each action dispatches into the viewer session and returns the full view
snapshot, so the page can re-render from one response.
"""

import logging

from fastapi import APIRouter, HTTPException, Request

from ..tracker.session import ViewerSession
from .models import (
    InputRequest,
    LoadPlaylistRequest,
    PlayerEventRequest,
    ResumePlaylistRequest,
    SelectVideoRequest,
    ToggleCompletionRequest,
    WatchProgressResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["viewer"])


def _session(request: Request) -> ViewerSession:
    return request.app.state.session


@router.get("/viewer")
async def get_viewer(request: Request):
    """Current view snapshot."""
    return _session(request).snapshot()


@router.post("/viewer/input")
async def set_input(request: Request, body: InputRequest):
    session = _session(request)
    session.set_input(body.text)
    return session.snapshot()


@router.post("/viewer/load")
async def load_playlist(request: Request, body: LoadPlaylistRequest):
    """
    Load a playlist from a URL.

    Fetch failures are reported in the snapshot's notification; the
    previously loaded playlist stays in place.
    """
    session = _session(request)
    await session.load_by_url(body.url)
    return session.snapshot()


@router.post("/viewer/resume")
async def resume_playlist(request: Request, body: ResumePlaylistRequest):
    session = _session(request)
    await session.resume(body.playlist_id)
    return session.snapshot()


@router.post("/viewer/select")
async def select_video(request: Request, body: SelectVideoRequest):
    session = _session(request)
    try:
        session.select(body.index)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return session.snapshot()


@router.post("/viewer/next")
async def next_video(request: Request):
    session = _session(request)
    session.next()
    return session.snapshot()


@router.post("/viewer/previous")
async def previous_video(request: Request):
    session = _session(request)
    session.previous()
    return session.snapshot()


@router.post("/viewer/toggle")
async def toggle_completion(request: Request, body: ToggleCompletionRequest):
    session = _session(request)
    try:
        session.toggle_completion(body.video_id)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return session.snapshot()


@router.post("/viewer/home")
async def go_home(request: Request):
    session = _session(request)
    session.go_home()
    return session.snapshot()


@router.post("/viewer/activity")
async def register_activity(request: Request):
    session = _session(request)
    session.register_activity()
    return {"navVisible": session.nav_visible}


@router.post("/viewer/player")
async def player_event(request: Request, body: PlayerEventRequest):
    """Receive a state change (plus position sample) from the embedded player."""
    session = _session(request)
    session.player_event(
        body.event,
        current_time=body.current_time,
        duration=body.duration,
        video_id=body.video_id,
    )
    return session.snapshot()


@router.get("/progress/{video_id}", response_model=WatchProgressResponse)
async def get_progress(request: Request, video_id: str):
    return _session(request).progress.get(video_id).to_dict()


@router.get("/history")
async def get_history(request: Request):
    return [entry.to_dict() for entry in _session(request).history.entries()]
