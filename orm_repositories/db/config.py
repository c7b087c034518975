from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database connection settings.

    Reads from environment variables (or .env via pydantic-settings):
      - DATABASE_URL
      - SQL_ECHO

    The URL may use a bare scheme (postgresql://, sqlite://); async and sync
    variants are derived from it.
    """

    DATABASE_URL: Optional[str] = Field(
        default=None, description="SQLAlchemy database URL."
    )

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """Return the configured URL, failing if none is set."""
        if not self.DATABASE_URL:
            raise ValueError(
                "Database configuration missing. Ensure DATABASE_URL is set in the environment."
            )
        return self.DATABASE_URL

    @property
    def async_database_url(self) -> str:
        """
        Convert the base URL to an async driver URL, required for AsyncEngine.
        postgresql uses asyncpg, sqlite uses aiosqlite.
        """
        return to_async_url(self.database_url)

    @property
    def sync_database_url(self) -> str:
        """
        Provide a sync URL variant for Alembic offline mode. Async driver tags are
        stripped so no extra sync driver is required.
        """
        return to_sync_url(self.database_url)


# PUBLIC_INTERFACE
def to_async_url(url: str) -> str:
    """Normalize a postgresql/sqlite URL to its asyncio driver."""
    if url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return url
    if re.match(r"^postgres(ql)?(\+\w+)?://", url):
        return re.sub(r"^postgres(ql)?(\+\w+)?://", "postgresql+asyncpg://", url)
    if re.match(r"^sqlite(\+\w+)?://", url):
        return re.sub(r"^sqlite(\+\w+)?://", "sqlite+aiosqlite://", url)
    return url


# PUBLIC_INTERFACE
def to_sync_url(url: str) -> str:
    """Strip any driver tag from a postgresql/sqlite URL."""
    url = re.sub(r"^postgres(ql)?\+\w+://", "postgresql://", url)
    return re.sub(r"^sqlite\+\w+://", "sqlite://", url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object for reuse across modules."""
    return Settings()
