"""
Runtime configuration for the bookstore API.

Values are read from environment variables prefixed with
``BOOKSTORE_`` (for example ``BOOKSTORE_API_TOKEN``) and from an
optional ``.env`` file in the working directory. The data directory
defaults to the ``data`` folder shipped next to the package.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Amana Bookstore API"
    version: str = "1.0.0"

    data_dir: Path = DEFAULT_DATA_DIR
    books_file: str = "books.json"
    reviews_file: str = "reviews.json"

    # Static placeholder token, compared verbatim against the
    # ``Authorization`` header of write requests.
    api_token: str = "amana-bookstore-token"

    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("BOOKSTORE_PORT", "PORT"),
    )
    log_level: str = "INFO"

    @property
    def books_path(self) -> Path:
        return self.data_dir / self.books_file

    @property
    def reviews_path(self) -> Path:
        return self.data_dir / self.reviews_file


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
