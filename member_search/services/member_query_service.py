"""회원 조회 서비스 — 동적 검색, 집계, 벌크 변경의 진입점.

Member Query Service — Entry point for dynamic search, aggregation and
bulk updates. Each call is a stateless request/response over the given
session; every call emits one query event.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from member_search.models.member import Member
from member_search.repositories.member_repository import member_repository
from member_search.schemas.member import (
    AgeStatistics,
    MemberSearchCondition,
    MemberTeamDto,
    Page,
    PageRequest,
    TeamAgeAverage,
)
from member_search.utils.predicates import has_text
from member_search.utils.query_log import query_logger


def _condition_fields(condition: MemberSearchCondition) -> dict[str, str | int]:
    """로그용 조건 — 설정된 필드만 (Only the fields that are set, for logging)."""
    return condition.model_dump(exclude_none=True)


class MemberQueryService:
    """회원 조회 관련 비즈니스 로직을 처리하는 서비스.

    Service composing member queries from optional search parameters.
    Results are projections (DTOs), never entities, so nothing lazy
    escapes the session scope.
    """

    async def search(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition | None = None,
        page_request: PageRequest | None = None,
    ) -> Page[MemberTeamDto]:
        """검색 조건과 페이지 요청으로 회원을 조회합니다.

        Search members with optional filters and paging.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 회원 검색 조건, None이면 필터 없음 (Search condition; None = unfiltered)
            page_request: 페이지 요청, None이면 전체 (Paging request; None = everything)

        Returns:
            Page[MemberTeamDto]: 페이지 결과와 전체 개수 (Page rows and total count)
        """
        condition = condition or MemberSearchCondition()
        page_request = page_request or PageRequest()

        async with query_logger.track(
            "search",
            condition=_condition_fields(condition),
            offset=page_request.offset,
            limit=page_request.limit,
        ) as event:
            page: Page[MemberTeamDto] = await member_repository.search_page(
                db, condition, page_request
            )
            event["row_count"] = len(page.items)
            event["total"] = page.total
        return page

    async def count(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition | None = None,
    ) -> int:
        """페이지와 무관한 전체 일치 개수 (Total matches, independent of paging)."""
        condition = condition or MemberSearchCondition()
        async with query_logger.track("count", condition=_condition_fields(condition)) as event:
            total: int = await member_repository.count(db, condition)
            event["total"] = total
        return total

    async def aggregate(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition | None = None,
    ) -> AgeStatistics:
        """검색 조건에 맞는 회원의 나이 집계.

        Aggregate age over the matching members (count, sum, avg, min, max).
        """
        condition = condition or MemberSearchCondition()
        async with query_logger.track("aggregate", condition=_condition_fields(condition)) as event:
            statistics: AgeStatistics = await member_repository.aggregate(db, condition)
            event["row_count"] = statistics.count
        return statistics

    async def team_age_averages(self, db: AsyncSession) -> list[TeamAgeAverage]:
        async with query_logger.track("team_age_averages") as event:
            averages: list[TeamAgeAverage] = await member_repository.team_age_averages(db)
            event["row_count"] = len(averages)
        return averages

    async def get_member(self, db: AsyncSession, member_id: int) -> MemberTeamDto:
        """ID로 회원 한 명을 조회합니다 (정확히 1개).

        Retrieve exactly one member with its team.

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        async with query_logger.track("get_member", member_id=member_id):
            member: Member = await member_repository.get_with_team(db, member_id)
        return self._to_dto(member)

    async def find_member_by_username(
        self, db: AsyncSession, username: str
    ) -> MemberTeamDto | None:
        """이름으로 회원을 조회합니다 (0개 또는 1개).

        Retrieve zero or one member by username.

        Raises:
            NonUniqueResultError: 같은 이름의 회원이 여러 명일 때 (Duplicate usernames)
        """
        # 빈 이름은 조건 없음으로 해석되므로 조회하지 않음 — a blank name would match everyone
        if not has_text(username):
            return None

        async with query_logger.track("find_member_by_username") as event:
            member: MemberTeamDto | None = await member_repository.search_unique(
                db, MemberSearchCondition(username=username)
            )
            event["row_count"] = 0 if member is None else 1
        return member

    async def bulk_set_username(
        self, db: AsyncSession, new_value: str, age_less_than: int
    ) -> int:
        """나이가 기준 미만인 회원의 이름을 일괄 변경합니다.

        Bulk-set the username of members younger than ``age_less_than``.
        Pending changes are flushed first; afterwards every object loaded in
        the session is expired so later reads go back to storage.

        Returns:
            int: 영향받은 행 수 (Affected row count)
        """
        async with query_logger.track(
            "bulk_set_username", age_less_than=age_less_than
        ) as event:
            await db.flush()
            affected: int = await member_repository.bulk_set_username(db, new_value, age_less_than)
            # 벌크 연산은 영속성 컨텍스트를 갱신하지 않음 — bulk statements bypass loaded objects
            db.expire_all()
            event["affected_rows"] = affected
        return affected

    async def bulk_add_age(self, db: AsyncSession, amount: int) -> int:
        """모든 회원의 나이를 amount만큼 증가시킵니다 (Add ``amount`` to every age)."""
        async with query_logger.track("bulk_add_age", amount=amount) as event:
            await db.flush()
            affected: int = await member_repository.bulk_add_age(db, amount)
            db.expire_all()
            event["affected_rows"] = affected
        return affected

    @staticmethod
    def _to_dto(member: Member) -> MemberTeamDto:
        """팀이 로드된 회원을 프로젝션으로 변환합니다 (Member with loaded team to DTO)."""
        team = member.team
        return MemberTeamDto(
            member_id=member.id,
            username=member.username,
            age=member.age,
            team_id=team.id if team is not None else None,
            team_name=team.name if team is not None else None,
        )


# 싱글턴 인스턴스 — Singleton instance
member_query_service: MemberQueryService = MemberQueryService()
