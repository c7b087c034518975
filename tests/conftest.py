"""
Pytest configuration and fixtures.

Provides:
- A file-backed SQLite database per test (aiosqlite driver)
- A DataContextFactory bound to it, with or without the schema created
- Repositories in both session-holding and per-call-factory modes
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from orm_repositories.db.base import Base
from orm_repositories.db.session import DataContextFactory

MIGRATIONS_PATH = str(Path(__file__).resolve().parent / "migrations")


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def factory(database_url) -> AsyncGenerator[DataContextFactory, None]:
    """Factory over an empty database."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    factory = DataContextFactory(engine)
    yield factory
    await factory.dispose()


@pytest_asyncio.fixture
async def schema_factory(factory) -> DataContextFactory:
    """Factory over a database with every test model's table created."""
    async with factory.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return factory


@pytest_asyncio.fixture(params=["session", "factory"])
async def repo_kwargs(request, schema_factory) -> AsyncGenerator[dict, None]:
    """Constructor arguments for a repository in each data-context mode."""
    if request.param == "factory":
        yield {"factory": schema_factory}
        return
    async with schema_factory.session() as session:
        yield {"session": session}
