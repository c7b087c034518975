"""
Database startup lifecycle.

run_database_startup performs, in order and only when the matching flag is set:
  1. DROP_DATABASE     - drop every table (development only)
  2. APPLY_MIGRATIONS  - upgrade to the Alembic head
  3. ENSURE_CREATED    - create missing tables from model metadata (also after a drop)
  4. SEED_DATABASE     - call the seed callback (development only)

A rebuilt store goes through every revision, data migrations included.
create_all only adds tables the migrations do not own.

Errors are not caught here; a failed startup should stop the process.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field
from sqlalchemy import MetaData
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncSession

from orm_repositories.core.errors import require
from orm_repositories.core.settings import (
    RepositoryOptions,
    get_repository_options,
    is_development_environment,
)

from . import migrations
from .base import Base
from .session import DataContextFactory, get_data_context_factory

logger = logging.getLogger(__name__)

# (session), (session, was_dropped, was_created, was_migrated) or
# (session, was_dropped, was_migrated); may be async.
SeedCallback = Callable[..., Any]


class StartupResult(BaseModel):
    """Which startup steps ran."""
    was_dropped: bool = Field(default=False, description="Tables were dropped")
    was_created: bool = Field(default=False, description="Schema was created from metadata")
    was_migrated: bool = Field(default=False, description="Store was brought to the Alembic head")
    was_seeded: bool = Field(default=False, description="Seed callback was invoked")

    @property
    def touched_database(self) -> bool:
        return self.was_dropped or self.was_created or self.was_migrated or self.was_seeded


def _drop_all(connection: Connection) -> None:
    # Reflect rather than use model metadata so the alembic_version table goes too.
    reflected = MetaData()
    reflected.reflect(bind=connection)
    reflected.drop_all(bind=connection)


def _accepts(seed: SeedCallback, arg_count: int) -> bool:
    try:
        inspect.signature(seed).bind(*([None] * arg_count))
    except TypeError:
        return False
    return True


async def _invoke_seed(seed: SeedCallback, session: AsyncSession, result: StartupResult) -> None:
    if _accepts(seed, 4):
        outcome = seed(session, result.was_dropped, result.was_created, result.was_migrated)
    elif _accepts(seed, 3):
        outcome = seed(session, result.was_dropped, result.was_migrated)
    else:
        outcome = seed(session)
    if inspect.isawaitable(outcome):
        await outcome


# PUBLIC_INTERFACE
async def run_database_startup(
    seed: Optional[SeedCallback] = None,
    *,
    options: Optional[RepositoryOptions] = None,
    factory: Optional[DataContextFactory] = None,
    metadata: Optional[MetaData] = None,
    environment: Optional[str] = None,
) -> StartupResult:
    """
    Drop, migrate, create and seed the database according to options.

    Parameters:
      seed: callback receiving a session, and optionally either the
        was_dropped, was_created and was_migrated flags or just was_dropped
        and was_migrated. Required when SEED_DATABASE is set.
      options: startup flags; read from the environment when omitted.
      factory: session factory; the process-wide factory when omitted.
      metadata: schema used for ENSURE_CREATED; Base.metadata when omitted.
      environment: environment label; options.ENVIRONMENT when omitted.

    Returns:
      StartupResult describing which steps ran.
    """
    options = options or get_repository_options()
    environment = environment if environment is not None else options.ENVIRONMENT
    development = is_development_environment(environment)
    metadata = metadata if metadata is not None else Base.metadata
    result = StartupResult()

    if options.SEED_DATABASE:
        require(seed, "seed")

    drop = options.DROP_DATABASE and development
    if options.DROP_DATABASE and not development:
        logger.warning("DROP_DATABASE ignored outside development (environment=%s).", environment)
    seed_enabled = options.SEED_DATABASE and development
    if options.SEED_DATABASE and not development:
        logger.warning("SEED_DATABASE ignored outside development (environment=%s).", environment)
    create = options.ENSURE_CREATED or drop
    migrate = options.APPLY_MIGRATIONS

    if not (drop or create or migrate or seed_enabled):
        logger.debug("No database startup steps enabled.")
        return result

    factory = factory or get_data_context_factory()
    cfg = migrations.build_config(options.MIGRATIONS_PATH) if migrate else None

    if drop or create or migrate:
        async with factory.engine.begin() as connection:
            if drop:
                logger.info("Dropping all tables.")
                await connection.run_sync(_drop_all)
                result.was_dropped = True

            if migrate:
                assert cfg is not None
                logger.info("Running Alembic migrations: upgrade head")
                await migrations.upgrade(connection, cfg)
                result.was_migrated = True

            if create:
                logger.info("Creating missing tables from model metadata.")
                await connection.run_sync(metadata.create_all)
                result.was_created = True
        logger.info("Schema steps completed.")

    if seed_enabled:
        assert seed is not None
        logger.info("Running database seeding...")
        async with factory.session() as session:
            await _invoke_seed(seed, session, result)
            await session.commit()
        result.was_seeded = True
        logger.info("Seeding completed.")

    return result
