"""
Configuration management using pydantic-settings.
Loads environment variables with type validation.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "StudyDeck"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Local storage
    database_url: str = "sqlite:///studydeck.db"
    storage_key: str = "flashcards-app-state"
    storage_version: int = 1

    # Decks
    default_deck_title: str = "Untitled Deck"
    seed_sample_decks: bool = True

    # Study
    search_debounce_ms: int = 300

    @property
    def search_debounce_seconds(self) -> float:
        """Debounce window expressed in seconds for the event loop."""
        return self.search_debounce_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance.
    Pass an explicit Settings to create_app() to bypass it.
    """
    return Settings()
