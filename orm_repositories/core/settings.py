from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Environment labels treated as "development" for destructive startup steps.
DEVELOPMENT_ENVIRONMENTS = frozenset({"development", "dev"})


class RepositoryOptions(BaseSettings):
    """
    Startup behavior for a repository-backed database.

    This is separate from orm_repositories.db.config.Settings, which focuses on the
    connection itself. All flags default to False so an unconfigured process never
    touches the schema.
    """

    APPLY_MIGRATIONS: bool = Field(
        default=False,
        description="If true, upgrade the database to the Alembic head at startup.",
    )
    ENSURE_CREATED: bool = Field(
        default=False,
        description="If true, create any missing tables from the model metadata at startup.",
    )
    DROP_DATABASE: bool = Field(
        default=False,
        description="If true, drop every table at startup (development only).",
    )
    SEED_DATABASE: bool = Field(
        default=False,
        description="If true, run the seed callback at startup (development only).",
    )

    # Alembic script directory used when APPLY_MIGRATIONS is set
    MIGRATIONS_PATH: Optional[str] = Field(
        default=None, description="Filesystem path of the Alembic script location."
    )

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (development/test/production)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def _normalize_environment(cls, v):
        """Lower-case and strip the environment label; blank means unset."""
        if v is None:
            return None
        v = str(v).strip().lower()
        return v or None

    @property
    def is_development(self) -> bool:
        """True when ENVIRONMENT names a development environment."""
        return is_development_environment(self.ENVIRONMENT)

    @property
    def touches_database(self) -> bool:
        """True when at least one startup step is enabled."""
        return (
            self.APPLY_MIGRATIONS
            or self.ENSURE_CREATED
            or self.DROP_DATABASE
            or self.SEED_DATABASE
        )


# PUBLIC_INTERFACE
def is_development_environment(environment: Optional[str]) -> bool:
    """Return True if the environment label is a development label."""
    if not environment:
        return False
    return environment.strip().lower() in DEVELOPMENT_ENVIRONMENTS


# PUBLIC_INTERFACE
def get_repository_options() -> RepositoryOptions:
    """
    Return a new RepositoryOptions instance populated from environment variables.

    Note:
      A new instance is built on each call so tests can change the environment
      between calls.
    """
    return RepositoryOptions()
