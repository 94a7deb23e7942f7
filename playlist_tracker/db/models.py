"""SQLAlchemy ORM models for locally persisted tracker state."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StoredRecord(Base):
    """A keyed JSON document, overwritten wholesale on every save.

    The tracker keeps two records: the progress mapping and the history list.
    """

    __tablename__ = "stored_records"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    def __repr__(self) -> str:
        return f"<StoredRecord(key={self.key!r}, size={len(self.value or '')})>"
