"""Tests for the application context."""

from pathlib import Path

from studydeck.config import Settings
from studydeck.decks.service import SAMPLE_DECK_TITLES
from studydeck.main import create_app
from studydeck.study.schemas import SessionPhase

from tests.conftest import ConfirmStub, ManualLoop


def _file_settings(tmp_path: Path, **overrides) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'studydeck.db'}",
        **overrides,
    )


class TestCreateApp:
    """Test suite for create_app wiring."""

    def test_first_run_studies_first_sample_deck(self, settings: Settings) -> None:
        app = create_app(settings, loop=ManualLoop())
        try:
            assert [d.title for d in app.store.decks] == list(SAMPLE_DECK_TITLES)
            assert app.session.deck_id == app.store.decks[0].id
            assert app.session.phase is SessionPhase.EMPTY
        finally:
            app.close()

    def test_no_seed_leaves_session_inactive(self, settings: Settings) -> None:
        settings = settings.model_copy(update={"seed_sample_decks": False})
        app = create_app(settings, loop=ManualLoop())
        try:
            assert app.store.decks == []
            assert app.session.active is False
        finally:
            app.close()

    def test_session_listens_to_store(self, settings: Settings) -> None:
        app = create_app(settings, loop=ManualLoop())
        try:
            deck = app.store.create_deck("Capitals")
            app.store.add_card(deck.id, "capital of France", "Paris")

            assert app.session.deck_id == deck.id
            assert app.session.current_card().back == "Paris"
        finally:
            app.close()

    def test_confirmation_is_wired(self, settings: Settings) -> None:
        confirm = ConfirmStub(answer=False)
        app = create_app(settings, confirm=confirm, loop=ManualLoop())
        try:
            deck = app.store.decks[0]
            assert app.store.delete_deck(deck.id) is False
            assert len(confirm.prompts) == 1
        finally:
            app.close()

    def test_debounce_window_from_settings(self, settings: Settings) -> None:
        loop = ManualLoop()
        settings = settings.model_copy(update={"search_debounce_ms": 500})
        app = create_app(settings, loop=loop)
        try:
            deck = app.store.create_deck("Capitals")
            app.store.add_card(deck.id, "capital of France", "Paris")
            app.store.add_card(deck.id, "2+2", "4")

            app.session.set_search_query("paris")
            loop.advance(0.4)
            assert app.session.match_count() is None
            loop.advance(0.2)
            assert app.session.match_count() == 1
        finally:
            app.close()


class TestPersistenceAcrossRuns:
    """State written by one app instance is restored by the next."""

    def test_round_trip_through_file_storage(self, tmp_path: Path) -> None:
        settings = _file_settings(tmp_path)

        first = create_app(settings, loop=ManualLoop())
        deck = first.store.create_deck("Capitals")
        card = first.store.add_card(deck.id, "capital of France", "Paris")
        first.store.add_card(deck.id, "capital of Spain", "Madrid")
        first.store.rename_deck(deck.id, "European capitals")
        first.close()

        second = create_app(settings, loop=ManualLoop())
        try:
            restored = second.store.current_deck
            assert restored.id == deck.id
            assert restored.title == "European capitals"
            assert [(c.id, c.front, c.back) for c in restored.cards][0] == (card.id, "capital of France", "Paris")
            assert len(restored.cards) == 2
            assert second.session.deck_id == deck.id
            assert second.session.phase is SessionPhase.HAS_CARDS
        finally:
            second.close()

    def test_reset_returns_to_sample_decks(self, tmp_path: Path) -> None:
        settings = _file_settings(tmp_path)

        app = create_app(settings, loop=ManualLoop())
        app.store.create_deck("Mine")
        app.reset()
        app.close()

        again = create_app(settings, loop=ManualLoop())
        try:
            assert [d.title for d in again.store.decks] == list(SAMPLE_DECK_TITLES)
            assert again.session.deck_id == again.store.decks[0].id
        finally:
            again.close()
