"""
Custom exceptions for the application.
"""


class StudyDeckException(Exception):
    """Base exception for StudyDeck application."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ═══════════════════════════════════════════════════════════════════════════
# PERSISTENCE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════


class PersistenceError(StudyDeckException):
    """Raised when the local storage cannot be read or written."""
    pass


class StateDecodeError(PersistenceError):
    """Raised when a stored payload is not valid JSON."""
    pass


class IncompatibleStateError(PersistenceError):
    """Raised when a stored payload has the wrong version or shape."""
    pass
