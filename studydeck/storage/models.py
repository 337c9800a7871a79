"""
SQLAlchemy models for storage module.
A single key/value table holding serialized application snapshots.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studydeck.database import Base


class StorageRecord(Base):
    """
    One serialized value stored under a string key.
    The application only ever writes the key from settings.storage_key.
    """

    __tablename__ = "storage_records"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<StorageRecord(key={self.key}, size={len(self.value)})>"
