"""
Persistence gateway - round-trips the full application state
to local storage with a schema version guard.

Nothing here raises to the caller: a failed save leaves the
in-memory state authoritative, a failed load means "no prior data".
"""

import json
import logging
import time
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from studydeck.core.exceptions import (
    IncompatibleStateError,
    PersistenceError,
    StateDecodeError,
)
from studydeck.decks.schemas import Card, Deck
from studydeck.storage.repository import StorageRepository
from studydeck.storage.schemas import STORAGE_VERSION, PersistedState

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "flashcards-app-state"


def _now_ms() -> int:
    return int(time.time() * 1000)


class PersistenceGateway:
    """Loads, saves and clears the single persisted state record."""

    def __init__(
        self,
        repository: StorageRepository,
        key: str = DEFAULT_STORAGE_KEY,
        version: int = STORAGE_VERSION,
        clock: Callable[[], int] = _now_ms,
    ):
        self.repository = repository
        self.key = key
        self.version = version
        self._clock = clock

    def load(self) -> Optional[PersistedState]:
        """
        Load the persisted state.

        Returns:
            PersistedState, or None if there is no prior data or the
            stored payload is unreadable, of another version or malformed
        """
        try:
            raw = self.repository.get_item(self.key)
            if raw is None:
                logger.info("[Storage] No saved state found")
                return None

            state = self._decode(raw)
        except IncompatibleStateError as e:
            logger.warning(f"[Storage] {e.message}. Falling back to defaults.")
            return None
        except PersistenceError as e:
            logger.error(f"[Storage] Load error: {e.message}")
            return None

        logger.info(f"[Storage] Loaded state successfully. Decks: {len(state.decks)}")
        return state

    def save(self, decks: Sequence[Deck], current_deck_id: Optional[str]) -> bool:
        """
        Serialize and store a snapshot of the decks and selection.

        Returns:
            True if the snapshot was written, False if the write failed
        """
        try:
            payload = self._encode(decks, current_deck_id)
            self.repository.set_item(self.key, payload)
        except PersistenceError as e:
            logger.error(f"[Storage] Save error: {e.message}")
            return False

        logger.debug("[Storage] State saved successfully")
        return True

    def clear(self) -> None:
        """Remove any persisted record."""
        try:
            self.repository.remove_item(self.key)
        except PersistenceError as e:
            logger.error(f"[Storage] Clear error: {e.message}")
            return

        logger.info("[Storage] State cleared")

    # ═══════════════════════════════════════════════════════════════════════
    # SERIALIZATION
    # ═══════════════════════════════════════════════════════════════════════

    def _encode(self, decks: Sequence[Deck], current_deck_id: Optional[str]) -> str:
        try:
            state = PersistedState(
                version=self.version,
                timestamp=self._clock(),
                decks=list(decks or []),
                current_deck_id=current_deck_id or None,
            )
            return state.model_dump_json(by_alias=True)
        except (ValidationError, ValueError, TypeError) as e:
            raise PersistenceError(f"Serialization failed: {e}") from e

    def _decode(self, raw: str) -> PersistedState:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StateDecodeError(f"Parse error: {e}") from e

        if not isinstance(data, dict):
            raise IncompatibleStateError("Incompatible or missing version")

        # bool is an int subclass; true must not pass for version 1
        version = data.get("version")
        if type(version) is not int or version != self.version:
            raise IncompatibleStateError("Incompatible or missing version")

        if not isinstance(data.get("decks"), list):
            raise IncompatibleStateError("Invalid decks structure")

        try:
            state = PersistedState.model_validate({**data, "decks": []})
        except ValidationError as e:
            raise IncompatibleStateError(
                f"Invalid state payload ({e.error_count()} errors)"
            ) from e

        state.decks = self._decode_decks(data["decks"])
        return state

    def _decode_decks(self, entries: list) -> List[Deck]:
        """Validate decks one by one, dropping malformed decks and cards."""
        decks: List[Deck] = []
        for position, entry in enumerate(entries):
            cards = entry.get("cards", []) if isinstance(entry, dict) else None
            if not isinstance(cards, list):
                logger.warning(f"[Storage] Dropped malformed deck at position {position}")
                continue

            valid_cards: List[Card] = []
            for card in cards:
                try:
                    valid_cards.append(Card.model_validate(card))
                except ValidationError:
                    logger.warning(f"[Storage] Dropped malformed card in deck at position {position}")

            try:
                decks.append(Deck.model_validate({**entry, "cards": valid_cards}))
            except ValidationError:
                logger.warning(f"[Storage] Dropped malformed deck at position {position}")
        return decks
