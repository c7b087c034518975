from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import Executable, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from orm_repositories.db.session import DataContextFactory

ModelT = TypeVar("ModelT")


class QueryableRepository(Generic[ModelT]):
    """
    Base class for repositories over one mapped model.

    A repository is built either with an AsyncSession, which it holds for its
    own lifetime (closing it when used as an async context manager), or with a
    DataContextFactory, from which it opens a fresh session for every call.

    Usage:
        class WidgetRepository(QueryableRepository[Widget]):
            model = Widget
    """

    model: Type[ModelT]

    def __init__(
        self,
        session: Optional[AsyncSession] = None,
        *,
        factory: Optional[DataContextFactory] = None,
        model: Optional[Type[ModelT]] = None,
    ) -> None:
        if (session is None) == (factory is None):
            raise ValueError("Provide exactly one of 'session' or 'factory'.")
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(
                f"{type(self).__name__} has no model; set the 'model' class attribute."
            )
        self.session = session
        self.factory = factory

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @asynccontextmanager
    async def data_context(self) -> AsyncIterator[AsyncSession]:
        """Yield the held session, or a per-call session from the factory."""
        if self.session is not None:
            yield self.session
        else:
            assert self.factory is not None
            async with self.factory.session() as session:
                yield session

    def as_queryable(self) -> Select:
        """
        Return a lazy SELECT over every row of the model.

        Nothing runs until the statement (or one derived from it with where,
        order_by, limit, ...) is passed to execute/scalars.
        """
        return select(self.model)

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        async with self.data_context() as session:
            return await session.execute(statement, params or {})

    async def scalars(
        self, statement: Optional[Executable] = None, params: Optional[dict[str, Any]] = None
    ) -> Sequence[Any]:
        """Execute and return all scalars; defaults to as_queryable()."""
        if statement is None:
            statement = self.as_queryable()
        async with self.data_context() as session:
            result = await session.execute(statement, params or {})
            return result.scalars().all()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        async with self.data_context() as session:
            result = await session.execute(statement, params or {})
            return result.scalar_one_or_none()

    async def close(self) -> None:
        """Close the held session, if any."""
        if self.session is not None:
            await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
