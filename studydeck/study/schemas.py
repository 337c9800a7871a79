"""
Pydantic schemas for study module.
Read-only snapshots of the study session for the presentation layer.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionPhase(str, Enum):
    """Top-level state of the study session."""
    INACTIVE = "inactive"
    HAS_CARDS = "has_cards"
    EMPTY = "empty"


class StudySessionState(BaseModel):
    """Snapshot of the session fields."""

    model_config = ConfigDict(frozen=True)

    active: bool = Field(False, description="Whether a deck is being studied")
    deck_id: Optional[str] = Field(None, description="Studied deck ID")
    card_index: int = Field(0, ge=0, description="0-based index into the visible cards")
    flipped: bool = Field(False, description="Whether the back side is showing")
    phase: SessionPhase = Field(SessionPhase.INACTIVE, description="Session state")
    query: str = Field("", description="Applied (normalized) search query")


class StudyCard(BaseModel):
    """The card currently on screen."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Card ID")
    front: str = Field(..., description="Question/front side")
    back: str = Field(..., description="Answer/back side")
    index: int = Field(..., description="0-based position in the visible cards")
    total: int = Field(..., description="Number of visible cards")
    flipped: bool = Field(False, description="Whether the back side is showing")

    @property
    def label(self) -> str:
        """Position label such as "2 / 10"."""
        return f"{self.index + 1} / {self.total}"
