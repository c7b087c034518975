from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from orm_repositories.core.errors import require

from .config import Settings, get_settings


class DataContextFactory:
    """
    Factory for short-lived AsyncSession instances bound to one engine.

    Repositories built from a factory open a fresh session per operation, so a
    single repository can be shared by concurrent tasks without sharing a session.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> None:
        self.engine = require(engine, "engine")
        self.session_maker = session_maker or async_sessionmaker(
            bind=engine, expire_on_commit=False, autoflush=False
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DataContextFactory":
        """Build an engine from database settings and wrap it in a factory."""
        settings = settings or get_settings()
        engine = create_async_engine(
            settings.async_database_url,
            echo=settings.SQL_ECHO,
            pool_pre_ping=True,
        )
        return cls(engine)

    def create(self) -> AsyncSession:
        """Return a new AsyncSession; the caller is responsible for closing it."""
        return self.session_maker()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a new AsyncSession and close it on every exit path."""
        async with self.session_maker() as session:
            yield session

    async def dispose(self) -> None:
        """Release the engine's pooled connections."""
        await self.engine.dispose()


_FACTORY: DataContextFactory | None = None


def _ensure_factory_initialized() -> None:
    """
    Lazily initialize the process-wide factory from the environment.
    """
    global _FACTORY
    if _FACTORY is None:
        _FACTORY = DataContextFactory.from_settings(get_settings())


# PUBLIC_INTERFACE
def get_data_context_factory() -> DataContextFactory:
    """Return the process-wide DataContextFactory."""
    _ensure_factory_initialized()
    assert _FACTORY is not None
    return _FACTORY


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the process-wide AsyncEngine instance."""
    return get_data_context_factory().engine


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession suitable for FastAPI dependency injection.
    Ensures the process-wide factory is initialized.
    """
    async with get_data_context_factory().session() as session:
        yield session


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Dispose the process-wide engine and forget it, if one was created."""
    global _FACTORY
    if _FACTORY is not None:
        factory, _FACTORY = _FACTORY, None
        await factory.dispose()
