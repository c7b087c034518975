from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

from fastapi import FastAPI
from sqlalchemy import MetaData

from orm_repositories.core.logging import configure_logging
from orm_repositories.core.settings import RepositoryOptions
from orm_repositories.db.session import DataContextFactory, dispose_engine
from orm_repositories.db.startup import SeedCallback, run_database_startup

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def database_lifespan(
    seed: Optional[SeedCallback] = None,
    *,
    options: Optional[RepositoryOptions] = None,
    factory: Optional[DataContextFactory] = None,
    metadata: Optional[MetaData] = None,
    environment: Optional[str] = None,
    log_level: Optional[int] = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Build a FastAPI lifespan that runs drop/create/migrate/seed before serving.

    Usage:
        app = FastAPI(lifespan=database_lifespan(seed_reference_data))

    When log_level is given, configure_logging(log_level) runs before any
    startup step.

    The StartupResult is stored on app.state.database_startup. Startup errors are
    not caught, so the application fails to boot. On shutdown the process-wide
    engine is disposed; a factory passed in by the caller is left to the caller.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if log_level is not None:
            configure_logging(log_level)
        logger.info("Running database startup...")
        result = await run_database_startup(
            seed,
            options=options,
            factory=factory,
            metadata=metadata,
            environment=environment,
        )
        app.state.database_startup = result
        logger.info("Database startup completed: %s", result.model_dump())
        try:
            yield
        finally:
            if factory is None:
                await dispose_engine()

    return lifespan
