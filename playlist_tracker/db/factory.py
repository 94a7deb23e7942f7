"""Storage factory."""

import os
from typing import Optional

from .storage import KeyValueStorageInterface, SQLAlchemyKeyValueStorage

# Default database URL for local use
DEFAULT_DATABASE_URL = "sqlite:///./playlist_tracker.db"


def create_storage(
    database_url: Optional[str] = None,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
) -> KeyValueStorageInterface:
    """
    Create key-value storage for the provided or discovered database URL.

    Parameters:
        database_url (Optional[str]): SQLAlchemy database URL; if None, DATABASE_URL or a local SQLite file is used.
        pool_size (int): Connection pool size for server databases; ignored for SQLite.
        max_overflow (int): Maximum overflow connections for server databases; ignored for SQLite.
        echo (bool): If true, enable SQL statement logging.
    """
    if database_url is None:
        database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    return SQLAlchemyKeyValueStorage(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
    )


def create_storage_from_config(config) -> KeyValueStorageInterface:
    """Create storage using the DATABASE_URL and pool settings of a Config."""
    return create_storage(
        database_url=config.DATABASE_URL,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        echo=config.DB_ECHO,
    )
