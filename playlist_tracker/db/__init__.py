"""Durable storage for tracker state."""

from .factory import create_storage, create_storage_from_config
from .models import Base, StoredRecord
from .storage import KeyValueStorageInterface, SQLAlchemyKeyValueStorage

__all__ = [
    "Base",
    "StoredRecord",
    "KeyValueStorageInterface",
    "SQLAlchemyKeyValueStorage",
    "create_storage",
    "create_storage_from_config",
]
