"""Web surface: viewer API, catalog proxy and static viewer page."""

from .app import create_app

__all__ = ["create_app"]
