"""Exceptions raised while fetching a playlist catalog."""


class CatalogError(Exception):
    """Base class for catalog fetch failures.

    Each subclass carries a stable ``kind`` string used in error payloads so the
    proxy endpoint and its clients agree on the failure type.
    """

    kind = "catalog"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(CatalogError):
    """The YouTube API key is not configured."""

    kind = "configuration"


class PlaylistNotFoundError(CatalogError):
    """The playlist does not exist or is private."""

    kind = "not_found"


class UpstreamError(CatalogError):
    """The YouTube API (or the catalog proxy) returned a non-success response."""

    kind = "upstream"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyPlaylistError(CatalogError):
    """The playlist has no videos that could be resolved."""

    kind = "empty_playlist"


ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (ConfigurationError, PlaylistNotFoundError, UpstreamError, EmptyPlaylistError)
}


def error_from_payload(payload: dict, status_code: int | None = None) -> CatalogError:
    """Rebuild a CatalogError from an ``{"error", "kind"}`` payload.

    Unknown kinds become UpstreamError.
    """
    message = payload.get("error") or f"Catalog proxy error ({status_code})"
    cls = ERRORS_BY_KIND.get(payload.get("kind"), UpstreamError)
    if cls is UpstreamError:
        return UpstreamError(message, status_code=status_code)
    return cls(message)
