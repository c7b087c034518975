"""
Tests for QueryableRepository and the statement helpers.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orm_repositories.repositories import QueryableRepository
from tests.models import Gadget, GadgetQueryRepository, Widget, WidgetRepository


class TestAsQueryable:
    """as_queryable() builds statements without touching the store."""

    def test_returns_select_without_executing(self):
        session = AsyncMock(spec=AsyncSession)
        repo = GadgetQueryRepository(session)

        stmt = repo.as_queryable()

        assert isinstance(stmt, Select)
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_composed_query_filters_and_orders(self, repo_kwargs):
        repo = WidgetRepository(**repo_kwargs)
        for name, qty in [("c", 3), ("a", 1), ("b", 2), ("z", 0)]:
            await repo.add(Widget(name=name, quantity=qty))

        stmt = repo.as_queryable().where(Widget.quantity > 0).order_by(Widget.name)
        rows = await repo.scalars(stmt)

        assert [w.name for w in rows] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_scalars_defaults_to_full_set(self, repo_kwargs):
        repo = WidgetRepository(**repo_kwargs)
        await repo.add(Widget(name="one"))
        await repo.add(Widget(name="two"))

        rows = await repo.scalars()

        assert sorted(w.name for w in rows) == ["one", "two"]

    @pytest.mark.asyncio
    async def test_projection(self, repo_kwargs):
        repo = WidgetRepository(**repo_kwargs)
        await repo.add(Widget(name="one", quantity=2))
        await repo.add(Widget(name="two", quantity=5))

        subquery = repo.as_queryable().subquery()
        total = await repo.scalar_one_or_none(select(func.sum(subquery.c.quantity)))

        assert total == 7


class TestPlainRepository:
    """A repository with no key parts offers only the queryable surface."""

    @pytest.mark.asyncio
    async def test_model_passed_to_constructor(self, schema_factory):
        repo = QueryableRepository(factory=schema_factory, model=Gadget)
        async with schema_factory.session() as session:
            session.add_all([Gadget(label="lamp"), Gadget(label="fan")])
            await session.commit()

        rows = await repo.scalars(repo.as_queryable().order_by(Gadget.label))

        assert [g.label for g in rows] == ["fan", "lamp"]
        assert repo.model_name == "Gadget"

    def test_missing_model_is_rejected(self):
        with pytest.raises(TypeError):
            QueryableRepository(AsyncMock(spec=AsyncSession))
