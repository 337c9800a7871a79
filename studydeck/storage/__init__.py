"""
Storage module - versioned local persistence of the application state.
"""

from studydeck.storage.gateway import PersistenceGateway
from studydeck.storage.repository import StorageRepository
from studydeck.storage.schemas import PersistedState

__all__ = ["PersistenceGateway", "StorageRepository", "PersistedState"]
