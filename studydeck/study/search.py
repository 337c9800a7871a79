"""
Search filter over a deck's cards.

A pure function of (cards, query): the result references the deck's
own Card objects in their original order and never copies or mutates them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from studydeck.decks.schemas import Card


def normalize_query(query: Optional[str]) -> str:
    """Trim and lower-case a raw query."""
    return (query or "").strip().lower()


@dataclass
class SearchView:
    """Derived view of a deck's cards for one normalized query."""
    query: str = ""
    filtered_cards: List[Card] = field(default_factory=list)

    @property
    def active(self) -> bool:
        """An empty query means "no filter", not "no matches"."""
        return bool(self.query)

    @property
    def match_count(self) -> Optional[int]:
        return len(self.filtered_cards) if self.active else None


def matches(card: Card, normalized_query: str) -> bool:
    """Case-insensitive substring match on either side of the card."""
    return normalized_query in card.front.lower() or normalized_query in card.back.lower()


def filter_cards(cards: Sequence[Card], query: Optional[str]) -> SearchView:
    """
    Build the search view for a card list.

    With an empty (after trimming) query the view is inactive and holds
    the full list; otherwise it holds the matching cards in source order.
    """
    normalized = normalize_query(query)
    if not normalized:
        return SearchView(query="", filtered_cards=list(cards))

    return SearchView(
        query=normalized,
        filtered_cards=[c for c in cards if matches(c, normalized)],
    )
