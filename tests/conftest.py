"""Pytest configuration and fixtures."""

import random
from collections.abc import Generator
from typing import Any, Callable, List, Optional, Tuple

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from studydeck.config import Settings
from studydeck.core.exceptions import PersistenceError
from studydeck.database import create_engine_from_settings, create_session_factory, create_tables
from studydeck.decks.ids import IdGenerator
from studydeck.decks.service import DeckStore
from studydeck.storage.gateway import PersistenceGateway
from studydeck.storage.repository import StorageRepository
from studydeck.study.session import StudySession

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"


class ConfirmStub:
    """Records confirmation prompts and answers with a fixed value."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: List[str] = []

    def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


class BrokenRepository:
    """Storage that fails every call, like a full or unavailable disk."""

    def __init__(self):
        self.calls = 0

    def get_item(self, key: str) -> Optional[str]:
        self.calls += 1
        raise PersistenceError("disk unavailable")

    def set_item(self, key: str, value: str) -> None:
        self.calls += 1
        raise PersistenceError("quota exceeded")

    def remove_item(self, key: str) -> None:
        self.calls += 1
        raise PersistenceError("disk unavailable")


class ManualHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualLoop:
    """call_later() scheduler driven by advance() instead of wall-clock time."""

    def __init__(self):
        self.now = 0.0
        self.handles: List[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [h for h in self.handles if not h.cancelled and h.when <= self.now]
        self.handles = [h for h in self.handles if h not in due and not h.cancelled]
        for handle in sorted(due, key=lambda h: h.when):
            handle.callback(*handle.args)

    @property
    def scheduled(self) -> int:
        return len([h for h in self.handles if not h.cancelled])


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, database_url=TEST_DATABASE_URL)


@pytest.fixture
def engine(settings: Settings) -> Generator[Engine, None, None]:
    """Fresh in-memory storage for each test."""
    engine = create_engine_from_settings(settings)
    create_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory: sessionmaker) -> StorageRepository:
    return StorageRepository(session_factory)


@pytest.fixture
def gateway(repository: StorageRepository) -> PersistenceGateway:
    return PersistenceGateway(repository, clock=lambda: 1_700_000_000_000)


@pytest.fixture
def confirm() -> ConfirmStub:
    return ConfirmStub(answer=True)


@pytest.fixture
def manual_loop() -> ManualLoop:
    return ManualLoop()


@pytest.fixture
def store(gateway: PersistenceGateway, confirm: ConfirmStub) -> DeckStore:
    """Empty deck store (no sample decks) with a seeded shuffle."""
    return DeckStore(
        gateway,
        confirm,
        seed_sample_decks=False,
        id_generator=IdGenerator(clock=lambda: 1_700_000_000_000),
        rng=random.Random(1234),
    )


@pytest.fixture
def session(store: DeckStore, manual_loop: ManualLoop) -> StudySession:
    """Study session wired to the store the way create_app() does it."""
    session = StudySession(store, debounce_seconds=0.3, loop=manual_loop)
    store.add_listener(session)
    return session


@pytest.fixture
def quiz_deck(store: DeckStore):
    """Deck with the two arithmetic/geography cards used across tests."""
    deck = store.create_deck("Quiz")
    store.add_card(deck.id, "2+2", "4")
    store.add_card(deck.id, "capital of France", "Paris")
    return deck
