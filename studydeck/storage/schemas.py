"""
Pydantic schema for the persisted application snapshot.
Wire keys follow the stored JSON format (camelCase currentDeckId).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from studydeck.decks.schemas import Deck

STORAGE_VERSION = 1


class PersistedState(BaseModel):
    """Versioned snapshot of every deck plus the current selection."""

    model_config = ConfigDict(populate_by_name=True)

    version: int = Field(STORAGE_VERSION, description="Schema version")
    timestamp: int = Field(0, description="Save time in epoch milliseconds")
    decks: List[Deck] = Field(default_factory=list, description="All decks in display order")
    current_deck_id: Optional[str] = Field(
        None,
        alias="currentDeckId",
        description="Selected deck ID",
    )
