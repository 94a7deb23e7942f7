"""Catalog proxy route.

Fetches a playlist with the server-held API key and returns the assembled
catalog, so browser clients never see the key. Failures come back as an
``{"error", "kind"}`` payload with a non-success status.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import (
    CatalogError,
    ConfigurationError,
    EmptyPlaylistError,
    PlaylistNotFoundError,
    UpstreamError,
)
from .models import CatalogErrorResponse, CatalogResponse, FetchPlaylistRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playlists", tags=["playlists"])

ERROR_STATUS_CODES = {
    ConfigurationError: 500,
    PlaylistNotFoundError: 404,
    UpstreamError: 502,
    EmptyPlaylistError: 422,
}


def catalog_error_response(error: CatalogError) -> JSONResponse:
    """Render a CatalogError as the proxy's error payload."""
    status_code = ERROR_STATUS_CODES.get(type(error), 500)
    payload = CatalogErrorResponse(error=error.message, kind=error.kind)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@router.post(
    "/fetch",
    response_model=CatalogResponse,
    responses={code: {"model": CatalogErrorResponse} for code in (404, 422, 500, 502)},
)
async def fetch_playlist(request: Request, body: FetchPlaylistRequest):
    """
    Fetch a playlist catalog.

    Args:
        body: Request containing the playlist ID

    Returns:
        The catalog payload, or an error payload with a matching status code
    """
    fetcher = request.app.state.catalog_fetcher
    logger.info(f"Catalog proxy fetching playlist: {body.playlist_id}")

    try:
        # The API client does blocking HTTP requests
        catalog = await asyncio.to_thread(fetcher.fetch, body.playlist_id)
    except CatalogError as e:
        logger.error(f"Error in catalog proxy for {body.playlist_id}: {e}")
        return catalog_error_response(e)

    return catalog.to_dict()
