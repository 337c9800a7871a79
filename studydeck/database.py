"""
Database configuration with SQLAlchemy 2.0.
Provides engine, session factory and the declarative Base
for the local storage table.
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from studydeck.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_engine_from_settings(settings: Settings) -> Engine:
    """
    Create the storage engine.

    In-memory SQLite shares a single connection so every session
    sees the same data.
    """
    url = settings.database_url
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            echo=settings.debug,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=settings.debug)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the given engine."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def create_tables(engine: Engine) -> None:
    """Create all tables. Existing tables are left untouched."""
    # Register models with the metadata
    from studydeck.storage import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("[Database] Storage tables created/verified")
