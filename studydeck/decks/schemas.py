"""
Pydantic schemas for decks module.
In-memory entities and read-only snapshots for the presentation layer.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════
# ENTITIES
# ═══════════════════════════════════════════════════════════════════════════


class Card(BaseModel):
    """A front/back text pair. Mutated in place on edit."""

    id: str = Field(..., description="Card ID, unique within its deck")
    front: str = Field(..., description="Question/front side")
    back: str = Field(..., description="Answer/back side")


class Deck(BaseModel):
    """A titled, ordered collection of cards."""

    id: str = Field(..., description="Deck ID")
    title: str = Field(..., description="Deck title")
    cards: List[Card] = Field(
        default_factory=list,
        description="Cards in study order",
    )

    def find_card(self, card_id: str) -> int:
        """Position of a card in this deck, or -1 if absent."""
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return i
        return -1


# ═══════════════════════════════════════════════════════════════════════════
# SNAPSHOTS
# ═══════════════════════════════════════════════════════════════════════════


class DeckListItem(BaseModel):
    """One row of the deck list."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Deck ID")
    title: str = Field(..., description="Deck title")
    selected: bool = Field(False, description="Whether this deck is the current selection")
    card_count: int = Field(0, description="Total number of cards")


class CardListItem(BaseModel):
    """One row of the card list, numbered from 1 in display order."""

    model_config = ConfigDict(frozen=True)

    position: int = Field(..., description="1-based display position")
    id: str = Field(..., description="Card ID")
    front: str = Field(..., description="Question/front side")
    back: str = Field(..., description="Answer/back side")
