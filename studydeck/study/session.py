"""
Study session - navigation and flip state over one deck's visible cards.

The visible cards are the deck's full card list, or the search view's
matches while a query is applied. The session only reads decks through
DeckStore and is told about card mutations via on_cards_changed().

States:
    INACTIVE   no deck is being studied
    HAS_CARDS  active, 0 <= card_index < len(visible cards)
    EMPTY      active, nothing visible (empty deck or no matches)

Commands issued in a state where they make no sense are ignored.
"""

import logging
from typing import List, Optional

from studydeck.decks.schemas import Card, CardListItem, Deck
from studydeck.decks.service import DeckStore
from studydeck.study.debounce import Debouncer, Scheduler
from studydeck.study.schemas import SessionPhase, StudyCard, StudySessionState
from studydeck.study.search import SearchView, filter_cards

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class StudySession:
    """State machine for studying a single deck."""

    def __init__(
        self,
        store: DeckStore,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        loop: Optional[Scheduler] = None,
    ):
        self.store = store
        self.active = False
        self.deck_id: Optional[str] = None
        self.card_index = 0
        self.flipped = False
        self._view = SearchView()
        self._debounced_search = Debouncer(self.on_search_query_changed, debounce_seconds, loop)

    # ═══════════════════════════════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def deck(self) -> Optional[Deck]:
        return self.store.get_deck(self.deck_id) if self.active else None

    @property
    def query(self) -> str:
        return self._view.query

    @property
    def visible_cards(self) -> List[Card]:
        """Filtered cards while a query is applied, otherwise the deck's cards."""
        deck = self.deck
        if deck is None:
            return []
        if self._view.active:
            return self._view.filtered_cards
        return deck.cards

    @property
    def phase(self) -> SessionPhase:
        if not self.active:
            return SessionPhase.INACTIVE
        return SessionPhase.HAS_CARDS if self.visible_cards else SessionPhase.EMPTY

    @property
    def search_pending(self) -> bool:
        return self._debounced_search.pending

    def state(self) -> StudySessionState:
        """Snapshot of the session fields."""
        return StudySessionState(
            active=self.active,
            deck_id=self.deck_id,
            card_index=self.card_index,
            flipped=self.flipped,
            phase=self.phase,
            query=self.query,
        )

    def current_card(self) -> Optional[StudyCard]:
        """The card on screen, or None outside HAS_CARDS."""
        cards = self.visible_cards
        if not cards or self.card_index >= len(cards):
            return None
        card = cards[self.card_index]
        return StudyCard(
            id=card.id,
            front=card.front,
            back=card.back,
            index=self.card_index,
            total=len(cards),
            flipped=self.flipped,
        )

    def card_list(self) -> List[CardListItem]:
        """Visible cards numbered in display order."""
        return [
            CardListItem(position=i + 1, id=c.id, front=c.front, back=c.back)
            for i, c in enumerate(self.visible_cards)
        ]

    def match_count(self) -> Optional[int]:
        """Number of matches while a query is applied, else None."""
        return self._view.match_count if self.active else None

    # ═══════════════════════════════════════════════════════════════════════
    # TRANSITIONS
    # ═══════════════════════════════════════════════════════════════════════

    def enter(self, deck_id: str) -> None:
        """Start studying a deck from its first card, with no filter."""
        deck = self.store.get_deck(deck_id)
        if deck is None:
            logger.warning(f"[StudySession] Deck not found: {deck_id}")
            return

        self._debounced_search.cancel()
        self.active = True
        self.deck_id = deck_id
        self.card_index = 0
        self.flipped = False
        self._view = SearchView()

        logger.info(f"[StudySession] Entered deck: {deck_id} ({self.phase.value})")

    def exit(self) -> None:
        """Leave study mode and clear every session field."""
        if not self.active:
            return

        self._debounced_search.cancel()
        logger.info(f"[StudySession] Exited deck: {self.deck_id}")
        self.active = False
        self.deck_id = None
        self.card_index = 0
        self.flipped = False
        self._view = SearchView()

    def flip(self) -> None:
        if self.phase is not SessionPhase.HAS_CARDS:
            return
        self.flipped = not self.flipped

    def next(self) -> None:
        """Advance one card; stays put on the last card."""
        if self.phase is not SessionPhase.HAS_CARDS:
            return
        if self.card_index >= len(self.visible_cards) - 1:
            return
        self.card_index += 1
        self.flipped = False
        logger.debug(f"[StudySession] Card {self.card_index + 1}/{len(self.visible_cards)}")

    def previous(self) -> None:
        """Go back one card; stays put on the first card."""
        if self.phase is not SessionPhase.HAS_CARDS:
            return
        if self.card_index <= 0:
            return
        self.card_index -= 1
        self.flipped = False
        logger.debug(f"[StudySession] Card {self.card_index + 1}/{len(self.visible_cards)}")

    def handle_key(self, key: str) -> bool:
        """
        Map a keyboard key to a session command.

        Returns:
            True if the key is a study shortcut and the session is active
        """
        if not self.active:
            return False

        commands = {
            " ": self.flip,
            "ArrowLeft": self.previous,
            "ArrowRight": self.next,
            "Escape": self.exit,
        }
        command = commands.get(key)
        if command is None:
            return False
        command()
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # SEARCH
    # ═══════════════════════════════════════════════════════════════════════

    def set_search_query(self, text: str) -> None:
        """Keystroke entry point: apply the query once typing pauses."""
        self._debounced_search(text)

    def flush_search(self) -> bool:
        """Apply a pending query now. Returns True if one was pending."""
        return self._debounced_search.flush()

    def on_search_query_changed(self, query: str) -> None:
        """Recompute the visible cards for a query and restart from the first."""
        deck = self.deck
        if deck is None:
            return

        self._view = filter_cards(deck.cards, query)
        self.card_index = 0
        self.flipped = False

        if self._view.active:
            logger.debug(f"[StudySession] Query '{self._view.query}' matched {self._view.match_count} cards")

    # ═══════════════════════════════════════════════════════════════════════
    # DECK STORE NOTIFICATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def on_cards_changed(self, deck_id: Optional[str] = None) -> None:
        """Re-derive the visible cards after a card mutation and clamp the index."""
        deck = self.deck
        if deck is None or (deck_id is not None and deck_id != self.deck_id):
            return

        self._view = filter_cards(deck.cards, self._view.query)
        total = len(self.visible_cards)
        self.card_index = min(self.card_index, total - 1) if total else 0
        self.flipped = False

    def on_deck_selected(self, deck_id: str) -> None:
        self.enter(deck_id)

    def on_deck_removed(self, deck_id: str) -> None:
        if self.active and self.deck_id == deck_id:
            self.exit()
