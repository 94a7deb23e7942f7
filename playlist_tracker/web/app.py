"""
FastAPI web application for the playlist progress tracker.

Serves the viewer page, the viewer action API and the catalog proxy.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..config import Config
from ..db.factory import create_storage_from_config
from ..db.storage import KeyValueStorageInterface
from ..tracker.history import HistoryStore
from ..tracker.progress import ProgressStore
from ..tracker.scheduler import AsyncioScheduler, Scheduler
from ..tracker.session import ViewerSession
from ..youtube.catalog import CatalogFetcher, CatalogSource, create_catalog_fetcher
from .playlist_routes import router as playlist_router
from .viewer_routes import router as viewer_router

logger = logging.getLogger(__name__)

STATIC_PATH = os.path.join(os.path.dirname(__file__), "static")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def create_app(
    config: Optional[Config] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    fetcher: Optional[CatalogSource] = None,
    catalog_fetcher: Optional[CatalogSource] = None,
    scheduler: Optional[Scheduler] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators that are not passed in are created from configuration.

    Parameters:
        config: Application configuration; loaded from the environment if omitted.
        storage: Durable key-value storage for progress and history.
        fetcher: Catalog source used by the viewer (direct API or proxy).
        catalog_fetcher: Catalog source served by the proxy route. It must
            call the API directly; when omitted it is the viewer fetcher
            unless that one goes through a proxy.
        scheduler: Timer source for the player controller and nav bar.
    """
    config = config or Config()
    storage = storage or create_storage_from_config(config)
    fetcher = fetcher or create_catalog_fetcher(config)
    if catalog_fetcher is None:
        # The proxy route never forwards to another proxy
        if config.uses_proxy:
            catalog_fetcher = CatalogFetcher(api_key=config.YOUTUBE_API_KEY)
        else:
            catalog_fetcher = fetcher
    scheduler = scheduler or AsyncioScheduler()

    progress = ProgressStore(storage, threshold=config.COMPLETION_THRESHOLD)
    history = HistoryStore(storage, limit=config.HISTORY_LIMIT)
    session = ViewerSession(
        fetcher=fetcher,
        progress=progress,
        history=history,
        scheduler=scheduler,
        poll_interval=config.PROGRESS_POLL_INTERVAL,
        advance_delay=config.AUTO_ADVANCE_DELAY,
        nav_hide_delay=config.NAV_HIDE_DELAY,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """
        FastAPI lifespan context manager.

        Handles startup logging and releases timers and storage on shutdown.
        """
        logger.info("Application started")
        if not config.YOUTUBE_API_KEY and not config.uses_proxy:
            logger.warning("YOUTUBE_API_KEY is not set; playlist fetches will fail")

        yield

        session.close()
        storage.close()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Playlist Progress Tracker",
        description="Track and resume progress through YouTube playlists",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store collaborators in app state for access in routes
    app.state.config = config
    app.state.storage = storage
    app.state.catalog_fetcher = catalog_fetcher
    app.state.session = session

    app.include_router(playlist_router)
    app.include_router(viewer_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "playlist-tracker"}

    @app.get("/")
    async def root():
        """Redirect the root URL to the viewer page."""
        return RedirectResponse(url="/index.html", status_code=302)

    # Mount static files (must be last to avoid route conflicts)
    if os.path.exists(STATIC_PATH):
        app.mount("/", StaticFiles(directory=STATIC_PATH, html=True), name="static")
        logger.debug(f"Serving static files from {STATIC_PATH}")
    else:
        logger.warning(f"Static directory not found: {STATIC_PATH}")

    return app


if __name__ == "__main__":
    import uvicorn

    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.environ.get("PORT", "8080")))
