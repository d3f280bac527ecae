"""Centralized configuration for vector-search using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vector_search.search.stopwords import BUNDLED_LISTS, DEFAULT_LANGUAGE


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``VECTOR_SEARCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VECTOR_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Stop words
    stop_words_language: str = Field(
        default=DEFAULT_LANGUAGE, description=f"Bundled stop-word list to load ({', '.join(BUNDLED_LISTS)})"
    )
    stop_words_file: Path | None = Field(
        default=None, description="One-word-per-line stop-word file; overrides the bundled list"
    )
    extra_stop_words: str = Field(default="", description="Comma-separated stop words added to the list")

    # Search
    max_results: int = Field(default=20, ge=1, description="Maximum results printed by the command line")
    engine_name: str = Field(default="default", min_length=1, description="Engine label for metrics and spans")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("stop_words_language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in BUNDLED_LISTS:
            raise ValueError(f"Unknown stop-word list '{value}'. Available: {list(BUNDLED_LISTS)}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return normalized

    def get_extra_stop_words(self) -> list[str]:
        return [word.strip().lower() for word in self.extra_stop_words.split(",") if word.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached process settings."""
    return Settings()
