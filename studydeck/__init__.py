"""
StudyDeck - single-user flashcard study core.

Decks, cards, a study session state machine, live search filtering
and a versioned local persistence layer.
"""

__version__ = "0.1.0"
