"""Key-value storage for tracker state.

Provides an abstract interface and a SQLAlchemy implementation. Values are
opaque strings (JSON documents); every ``set`` replaces the whole record.
"""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, StoredRecord

logger = logging.getLogger(__name__)


class KeyValueStorageInterface(ABC):
    """Abstract interface for durable keyed records."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the record stored under ``key``.

        Returns:
            The stored string, or None if no record exists.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the record stored under ``key``.

        The write is committed before this returns.
        """

    @abstractmethod
    def close(self) -> None:
        """Release any held resources."""


class SQLAlchemyKeyValueStorage(KeyValueStorageInterface):
    """Key-value records in a single ``stored_records`` table."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        """
        Create the engine and session factory and ensure the table exists.

        Parameters:
            database_url (str): SQLAlchemy-compatible database URL.
            pool_size (int): Connection pool size for non-SQLite databases.
            max_overflow (int): Maximum overflow connections for non-SQLite databases.
            echo (bool): If true, enable SQLAlchemy SQL statement logging.
        """
        self.database_url = database_url

        # SQLite doesn't support connection pooling
        if database_url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases vanish per connection unless a single one is shared
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
            self.engine = create_engine(database_url, echo=echo, **engine_kwargs)
        else:
            self.engine = create_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                echo=echo,
            )

        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        logger.info(f"Storage initialized: {database_url.split('@')[-1] if '@' in database_url else database_url}")

    def _get_session(self) -> Session:
        return self.SessionLocal()

    def get(self, key: str) -> Optional[str]:
        with self._get_session() as session:
            record = session.get(StoredRecord, key)
            return record.value if record else None

    def set(self, key: str, value: str) -> None:
        with self._get_session() as session:
            record = session.get(StoredRecord, key)
            if record is None:
                session.add(StoredRecord(key=key, value=value))
            else:
                record.value = value
                record.updated_at = datetime.now(UTC)
            session.commit()

    def close(self) -> None:
        self.engine.dispose()
        logger.debug("Storage connections closed")
