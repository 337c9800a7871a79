"""
StudyDeck - application context.

Builds the storage stack, DeckStore and StudySession once and hands out
explicit references to them. The presentation layer drives the returned
FlashcardsApp and re-renders from its snapshots.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Engine

from studydeck.config import Settings, get_settings
from studydeck.database import create_engine_from_settings, create_session_factory, create_tables
from studydeck.decks.service import ConfirmCallback, DeckStore
from studydeck.storage.gateway import PersistenceGateway
from studydeck.storage.repository import StorageRepository
from studydeck.study.debounce import Scheduler
from studydeck.study.session import StudySession

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def always_confirm(message: str) -> bool:
    """Confirmation stand-in that accepts every prompt."""
    return True


@dataclass
class FlashcardsApp:
    """Owns the wired components for one running application."""
    settings: Settings
    engine: Engine
    gateway: PersistenceGateway
    store: DeckStore
    session: StudySession

    def reset(self) -> None:
        """Clear persisted data and start again from the defaults."""
        logger.info("[App] Resetting application state")
        self.store.reset()

    def close(self) -> None:
        """Cancel pending work and release the storage engine."""
        self.session.exit()
        self.engine.dispose()
        logger.info("[Shutdown] Storage engine disposed")


def create_app(
    settings: Optional[Settings] = None,
    confirm: Optional[ConfirmCallback] = None,
    loop: Optional[Scheduler] = None,
) -> FlashcardsApp:
    """
    Build the application context.

    Args:
        settings: Explicit settings; defaults to environment settings
        confirm: Yes/no prompt used before destructive operations
        loop: Event loop used to debounce search keystrokes

    Returns:
        FlashcardsApp with the session already studying the selected deck
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger.info(f"[Startup] Starting {settings.app_name} v{settings.app_version}")

    engine = create_engine_from_settings(settings)
    create_tables(engine)
    repository = StorageRepository(create_session_factory(engine))

    gateway = PersistenceGateway(
        repository,
        key=settings.storage_key,
        version=settings.storage_version,
    )
    store = DeckStore(
        gateway,
        confirm or always_confirm,
        default_title=settings.default_deck_title,
        seed_sample_decks=settings.seed_sample_decks,
    )
    session = StudySession(
        store,
        debounce_seconds=settings.search_debounce_seconds,
        loop=loop,
    )
    store.add_listener(session)

    if store.current_deck_id is not None:
        session.enter(store.current_deck_id)

    return FlashcardsApp(
        settings=settings,
        engine=engine,
        gateway=gateway,
        store=store,
        session=session,
    )
