"""
Storage repository - Data Access Layer for the local key/value store.
Every call opens its own session and commits before returning.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from studydeck.core.exceptions import PersistenceError
from studydeck.storage.models import StorageRecord

logger = logging.getLogger(__name__)


class StorageRepository:
    """Repository for reading and writing raw string values by key."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            PersistenceError: If the storage cannot be read
        """
        try:
            with self.session_factory() as session:
                stmt = select(StorageRecord.value).where(StorageRecord.key == key)
                return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Read failed for key {key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """
        Insert or replace the value stored under a key.

        Raises:
            PersistenceError: If the write is rejected
        """
        try:
            with self.session_factory() as session:
                record = session.get(StorageRecord, key)
                if record is None:
                    session.add(StorageRecord(key=key, value=value))
                else:
                    record.value = value
                    record.updated_at = datetime.now(timezone.utc)
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Write failed for key {key}: {e}") from e

        logger.debug(f"[StorageRepository] Wrote {len(value)} chars under key: {key}")

    def remove_item(self, key: str) -> None:
        """Delete the value stored under a key. Missing keys are ignored."""
        try:
            with self.session_factory() as session:
                session.execute(delete(StorageRecord).where(StorageRecord.key == key))
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Remove failed for key {key}: {e}") from e

        logger.debug(f"[StorageRepository] Removed key: {key}")
