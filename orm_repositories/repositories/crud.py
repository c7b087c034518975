from __future__ import annotations

import logging
from typing import Any, Generic, Optional, Tuple, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from orm_repositories.core.errors import ModelNotFoundError, RepositoryError, require
from orm_repositories.core.logging import model_context

from .base import ModelT, QueryableRepository
from .keys import MAX_KEY_PARTS, key_names, loaded_values, snapshot_of

logger = logging.getLogger(__name__)

KeyT = TypeVar("KeyT", bound=Tuple[Any, ...])


class CrudRepository(QueryableRepository[ModelT], Generic[ModelT, KeyT]):
    """
    Create/update/delete repository for a model with a 1, 2 or 3 part key.

    The key tuple is read from the model's primary key, so the same class serves
    single and composite keys:

        class OrderLineRepository(CrudRepository[OrderLine, tuple[int, int]]):
            model = OrderLine

    Failures inside add/update/delete are re-raised as RepositoryError with the
    original exception chained. A key that is not in the store raises
    ModelNotFoundError.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.key_names = key_names(self.model)
        if not 1 <= len(self.key_names) <= MAX_KEY_PARTS:
            raise TypeError(
                f"{self.model_name} has a {len(self.key_names)} part key; "
                f"{type(self).__name__} supports 1 to {MAX_KEY_PARTS}."
            )

    def key_of(self, model: ModelT) -> KeyT:
        """Return the key tuple of model."""
        return tuple(getattr(model, name) for name in self.key_names)  # type: ignore[return-value]

    async def find(self, *key: Any) -> Optional[ModelT]:
        """Return the row with the given key parts, or None."""
        if len(key) != len(self.key_names):
            raise ValueError(
                f"{self.model_name} key has {len(self.key_names)} part(s), got {len(key)}."
            )
        async with self.data_context() as session:
            return await self._get(session, key)

    async def add(self, model: ModelT) -> ModelT:
        """Insert model, commit, and return it with store-generated values loaded."""
        require(model, "model")
        with model_context(self.model_name):
            async with self.data_context() as session:
                try:
                    session.add(model)
                    await session.commit()
                    await session.refresh(model)
                    logger.debug("Added %s %r.", self.model_name, self.key_of(model))
                    return model
                except Exception as exc:
                    raise await self._failure(session, "add a new", model, exc) from exc

    async def update(self, model: ModelT) -> ModelT:
        """
        Copy the values present on model onto the stored row with the same key,
        commit, and return the re-read row.

        Raises:
          ModelNotFoundError: no row has model's key.
        """
        require(model, "model")
        with model_context(self.model_name):
            async with self.data_context() as session:
                try:
                    key = self.key_of(model)
                    existing = await self._get_existing(session, key, model)
                    if existing is not model:
                        for name, value in loaded_values(model).items():
                            if name not in self.key_names:
                                setattr(existing, name, value)
                    await session.commit()
                    updated = await self._get(session, key, populate_existing=True)
                    logger.debug("Updated %s %r.", self.model_name, key)
                    return updated  # type: ignore[return-value]
                except ModelNotFoundError:
                    raise
                except Exception as exc:
                    raise await self._failure(session, "update an existing", model, exc) from exc

    async def delete(self, model: ModelT) -> None:
        """
        Remove the stored row with model's key and commit.

        Raises:
          ModelNotFoundError: no row has model's key.
        """
        require(model, "model")
        with model_context(self.model_name):
            async with self.data_context() as session:
                try:
                    key = self.key_of(model)
                    existing = await self._get_existing(session, key, model)
                    await session.delete(existing)
                    await session.commit()
                    logger.debug("Deleted %s %r.", self.model_name, key)
                except ModelNotFoundError:
                    raise
                except Exception as exc:
                    raise await self._failure(session, "delete an existing", model, exc) from exc

    async def _get(
        self, session: AsyncSession, key: Tuple[Any, ...], *, populate_existing: bool = False
    ) -> Optional[ModelT]:
        if any(part is None for part in key):
            return None
        return await session.get(self.model, key, populate_existing=populate_existing)

    async def _get_existing(
        self, session: AsyncSession, key: Tuple[Any, ...], model: ModelT
    ) -> ModelT:
        existing = await self._get(session, key)
        if existing is None:
            raise ModelNotFoundError(
                self.model_name,
                key,
                repository=type(self).__name__,
                snapshot=snapshot_of(model),
            )
        return existing

    async def _failure(
        self, session: AsyncSession, action: str, model: ModelT, exc: Exception
    ) -> RepositoryError:
        snapshot = snapshot_of(model)
        await session.rollback()
        return RepositoryError(
            f"Failed to {action} '{self.model_name}' model in the "
            f"'{type(self).__name__}' repository! Error: {exc} Model: {snapshot}",
            repository=type(self).__name__,
            model_name=self.model_name,
            snapshot=snapshot,
        )
