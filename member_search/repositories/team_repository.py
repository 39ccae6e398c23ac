"""팀 레포지토리 — 팀 조회 쿼리.

Team Repository — Queries for the teams table.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.models.team import Team
from member_search.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the teams table.
    """

    def __init__(self) -> None:
        super().__init__(Team)

    async def find_by_name(self, db: AsyncSession, name: str) -> Team | None:
        """이름으로 팀을 조회합니다 (0개 또는 1개).

        Retrieve a team by name.

        Raises:
            NonUniqueResultError: 같은 이름의 팀이 여러 개인 경우 (Duplicate team names)
        """
        query: Select = select(Team).where(Team.name == name)
        return await self.fetch_one(db, query)

    async def get_all_ordered(self, db: AsyncSession) -> list[Team]:
        """이름순으로 모든 팀을 조회합니다 (All teams ordered by name)."""
        return list(await self.get_all(db, order_by=Team.name))


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
