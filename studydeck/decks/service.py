"""
Decks service - Business logic for deck and card management.

DeckStore owns the ordered deck collection. Every mutation is persisted
through the gateway before control returns, then registered listeners
(the study session) are told to re-derive their views.
"""

import logging
import random
from typing import Callable, List, Optional, Protocol, Set

from studydeck.decks.ids import IdGenerator
from studydeck.decks.schemas import Card, Deck, DeckListItem
from studydeck.storage.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

DEFAULT_DECK_TITLE = "Untitled Deck"
SAMPLE_DECK_TITLES = ("Sample Deck 1", "Sample Deck 2")

ConfirmCallback = Callable[[str], bool]


class DeckStoreListener(Protocol):
    """Receives notifications after DeckStore mutations."""

    def on_deck_selected(self, deck_id: str) -> None: ...

    def on_cards_changed(self, deck_id: str) -> None: ...

    def on_deck_removed(self, deck_id: str) -> None: ...


def _clean(text: Optional[str]) -> str:
    return (text or "").strip()


class DeckStore:
    """In-memory deck collection with write-through persistence."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        confirm: ConfirmCallback,
        default_title: str = DEFAULT_DECK_TITLE,
        seed_sample_decks: bool = True,
        id_generator: Optional[IdGenerator] = None,
        rng: Optional[random.Random] = None,
    ):
        self.gateway = gateway
        self.confirm = confirm
        self.default_title = default_title
        self.seed_sample_decks = seed_sample_decks
        self.ids = id_generator or IdGenerator()
        self._rng = rng or random.Random()
        self._listeners: List[DeckStoreListener] = []

        self.decks: List[Deck] = []
        self.current_deck_id: Optional[str] = None
        self._restore()

    def add_listener(self, listener: DeckStoreListener) -> None:
        """Register a listener for selection and card changes."""
        self._listeners.append(listener)

    # ═══════════════════════════════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════════════════════════════

    def get_deck(self, deck_id: Optional[str]) -> Optional[Deck]:
        """Find a deck by ID."""
        if deck_id is None:
            return None
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        return None

    @property
    def current_deck(self) -> Optional[Deck]:
        return self.get_deck(self.current_deck_id)

    def deck_list(self) -> List[DeckListItem]:
        """Deck list snapshot in display order."""
        return [
            DeckListItem(
                id=d.id,
                title=d.title,
                selected=d.id == self.current_deck_id,
                card_count=len(d.cards),
            )
            for d in self.decks
        ]

    def current_deck_title(self) -> str:
        """Title of the selected deck, or empty string with no selection."""
        deck = self.current_deck
        return deck.title if deck else ""

    # ═══════════════════════════════════════════════════════════════════════
    # DECK OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def create_deck(self, title: Optional[str] = None) -> Deck:
        """Create a deck, select it and persist. Blank titles get the placeholder."""
        deck = Deck(
            id=self.ids.next_id(self._deck_ids()),
            title=_clean(title) or self.default_title,
        )
        self.decks.append(deck)
        self.current_deck_id = deck.id
        self._persist()

        logger.info(f"[DeckStore] Created deck: {deck.id} - {deck.title}")
        self._notify_selected(deck.id)
        return deck

    def rename_deck(self, deck_id: str, title: Optional[str]) -> None:
        """Rename a deck. Unknown IDs are ignored."""
        deck = self.get_deck(deck_id)
        if deck is None:
            return

        deck.title = _clean(title) or self.default_title
        self._persist()
        logger.info(f"[DeckStore] Renamed deck: {deck_id} - {deck.title}")

    def delete_deck(self, deck_id: str) -> bool:
        """
        Delete a deck after confirmation.

        If it was selected, the first remaining deck becomes the
        selection, or nothing is selected when no deck remains.

        Returns:
            True if the deck was removed
        """
        deck = self.get_deck(deck_id)
        if deck is None:
            return False
        if not self.confirm(f'Delete deck "{deck.title}"? This cannot be undone.'):
            logger.debug(f"[DeckStore] Deck deletion declined: {deck_id}")
            return False

        self.decks = [d for d in self.decks if d.id != deck_id]
        was_selected = self.current_deck_id == deck_id
        if was_selected:
            self.current_deck_id = self.decks[0].id if self.decks else None
        self._persist()

        logger.info(f"[DeckStore] Deleted deck: {deck_id}")
        for listener in self._listeners:
            listener.on_deck_removed(deck_id)
        if was_selected and self.current_deck_id is not None:
            self._notify_selected(self.current_deck_id)
        return True

    def select_deck(self, deck_id: str) -> None:
        """Make a deck the current selection and switch the study context."""
        if self.get_deck(deck_id) is None:
            return

        if self.current_deck_id != deck_id:
            self.current_deck_id = deck_id
            self._persist()
        self._notify_selected(deck_id)

    def shuffle_deck(self, deck_id: str) -> None:
        """Shuffle a deck's cards in place (Fisher-Yates), then persist."""
        deck = self.get_deck(deck_id)
        if deck is None:
            return

        cards = deck.cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]
        self._persist()

        logger.info(f"[DeckStore] Shuffled deck: {deck_id} ({len(cards)} cards)")
        self._notify_cards_changed(deck_id)

    def shuffle_current_deck(self) -> None:
        """Shuffle the selected deck, if any."""
        if self.current_deck_id is not None:
            self.shuffle_deck(self.current_deck_id)

    # ═══════════════════════════════════════════════════════════════════════
    # CARD OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════

    def add_card(self, deck_id: str, front: Optional[str], back: Optional[str]) -> Optional[Card]:
        """
        Append a card to a deck.

        Returns:
            The new Card, or None if a side is blank or the deck is unknown
        """
        front, back = _clean(front), _clean(back)
        deck = self.get_deck(deck_id)
        if deck is None or not front or not back:
            return None

        taken = {c.id for c in deck.cards}
        card = Card(id=self.ids.next_id(taken), front=front, back=back)
        deck.cards.append(card)
        self._persist()

        logger.info(f"[DeckStore] Created card: {card.id} in deck: {deck_id}")
        self._notify_cards_changed(deck_id)
        return card

    def edit_card(
        self,
        deck_id: str,
        card_id: str,
        front: Optional[str],
        back: Optional[str],
    ) -> bool:
        """Update a card's text in place. Blank sides are rejected."""
        front, back = _clean(front), _clean(back)
        if not front or not back:
            return False
        deck = self.get_deck(deck_id)
        if deck is None:
            return False
        idx = deck.find_card(card_id)
        if idx == -1:
            return False

        card = deck.cards[idx]
        card.front = front
        card.back = back
        self._persist()

        logger.info(f"[DeckStore] Updated card: {card_id} in deck: {deck_id}")
        self._notify_cards_changed(deck_id)
        return True

    def delete_card(self, deck_id: str, card_id: str) -> bool:
        """Remove a card after confirmation."""
        deck = self.get_deck(deck_id)
        if deck is None:
            return False
        idx = deck.find_card(card_id)
        if idx == -1:
            return False
        if not self.confirm("Delete this card? This cannot be undone."):
            logger.debug(f"[DeckStore] Card deletion declined: {card_id}")
            return False

        del deck.cards[idx]
        self._persist()

        logger.info(f"[DeckStore] Deleted card: {card_id} from deck: {deck_id}")
        self._notify_cards_changed(deck_id)
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # STATE LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════

    def reset(self) -> None:
        """Drop the persisted record and start over from defaults."""
        self.gateway.clear()
        for listener in self._listeners:
            for deck in self.decks:
                listener.on_deck_removed(deck.id)
        self.decks = []
        self.current_deck_id = None
        self._restore()
        self._persist()

        if self.current_deck_id is not None:
            self._notify_selected(self.current_deck_id)

    def _restore(self) -> None:
        state = self.gateway.load()
        if state is not None and state.decks:
            self.decks = state.decks
            self._repair_duplicate_ids()
            if self.get_deck(state.current_deck_id) is not None:
                self.current_deck_id = state.current_deck_id
            else:
                self.current_deck_id = self.decks[0].id
            return

        if self.seed_sample_decks:
            for title in SAMPLE_DECK_TITLES:
                self.decks.append(Deck(id=self.ids.next_id(self._deck_ids()), title=title))
            self.current_deck_id = self.decks[0].id
            logger.info(f"[DeckStore] Seeded {len(self.decks)} sample decks")

    def _repair_duplicate_ids(self) -> None:
        seen_decks: Set[str] = set()
        for deck in self.decks:
            if deck.id in seen_decks:
                old = deck.id
                deck.id = self.ids.next_id(seen_decks)
                logger.warning(f"[DeckStore] Duplicate deck ID {old} reassigned to {deck.id}")
            seen_decks.add(deck.id)

            seen_cards: Set[str] = set()
            for card in deck.cards:
                if card.id in seen_cards:
                    old = card.id
                    card.id = self.ids.next_id(seen_cards)
                    logger.warning(f"[DeckStore] Duplicate card ID {old} reassigned to {card.id}")
                seen_cards.add(card.id)

    # ═══════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════

    def _deck_ids(self) -> Set[str]:
        return {d.id for d in self.decks}

    def _persist(self) -> bool:
        return self.gateway.save(self.decks, self.current_deck_id)

    def _notify_selected(self, deck_id: str) -> None:
        for listener in self._listeners:
            listener.on_deck_selected(deck_id)

    def _notify_cards_changed(self, deck_id: str) -> None:
        for listener in self._listeners:
            listener.on_cards_changed(deck_id)
