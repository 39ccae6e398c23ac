"""세션 범위(작업 단위) 테스트."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from member_search.database import session_scope
from member_search.models import Team
from member_search.repositories.team_repository import team_repository


class TestSessionScope:
    async def test_commits_on_success(self, session_factory: async_sessionmaker[AsyncSession]):
        async with session_scope(session_factory) as db:
            await team_repository.create(db, {"name": "teamC"})

        async with session_factory() as db:
            assert await team_repository.exists(db, {"name": "teamC"})

    async def test_rolls_back_on_error(self, session_factory: async_sessionmaker[AsyncSession]):
        with pytest.raises(RuntimeError):
            async with session_scope(session_factory) as db:
                db.add(Team("teamD"))
                await db.flush()
                raise RuntimeError("boom")

        async with session_factory() as db:
            assert await team_repository.find_by_name(db, "teamD") is None
