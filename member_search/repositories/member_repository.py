"""회원 레포지토리 — 동적 검색, 프로젝션, 집계, 벌크 쿼리.

Member Repository — Dynamic search, projection, aggregation and bulk queries.
Extends BaseRepository with member-specific queries: optional-filter search
over the member/team left join, paging with an on-demand count query,
subqueries, CASE projections and storage-level bulk updates.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, and_, case, delete, func, select, update
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, contains_eager

from member_search.models.member import Member
from member_search.models.team import Team
from member_search.repositories.base import BaseRepository
from member_search.schemas.member import (
    AgeStatistics,
    MemberDto,
    MemberSearchCondition,
    MemberTeamDto,
    OrderSpec,
    Page,
    PageRequest,
    TeamAgeAverage,
    UserDto,
    UsernameAverageAge,
)
from member_search.utils.exceptions import NonUniqueResultError
from member_search.utils.ordering import order_by_clauses
from member_search.utils.pagination import apply_page, paginate
from member_search.utils.predicates import age_eq, all_of, member_search_predicates, username_eq


class MemberRepository(BaseRepository[Member]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    Every method takes the session explicitly and runs to completion
    before returning; nothing is cached between calls.
    """

    def __init__(self) -> None:
        super().__init__(Member)

    # ── 기본 조회 (Basic lookups) ─────────────────────────────

    async def find_all(self, db: AsyncSession) -> list[Member]:
        return list(await self.get_all(db, order_by=Member.id))

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """이름이 일치하는 회원 목록을 조회합니다 (Members with the given username)."""
        return list(await self.get_all(db, filters={"username": username}, order_by=Member.id))

    async def find_one_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """이름으로 회원 한 명을 조회합니다 (0개 또는 1개).

        Raises:
            NonUniqueResultError: 같은 이름의 회원이 여러 명인 경우 (Duplicate usernames)
        """
        query: Select = select(Member).where(Member.username == username)
        return await self.fetch_one(db, query)

    async def find_by_username_and_age(
        self, db: AsyncSession, username: str, age: int
    ) -> Member | None:
        query: Select = select(Member).where(Member.username == username, Member.age == age)
        return await self.fetch_one(db, query)

    async def find_first(self, db: AsyncSession) -> Member | None:
        return await self.fetch_first(db, select(Member).order_by(Member.id))

    async def find_members(
        self,
        db: AsyncSession,
        username: str | None = None,
        age: int | None = None,
    ) -> list[Member]:
        """선택적 파라미터로 회원을 조회합니다.

        Retrieve members filtered by whichever parameters are given.
        A None parameter adds no condition.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 회원 이름 (Username, optional)
            age: 나이 (Age, optional)

        Returns:
            list[Member]: 회원 목록 (List of members)
        """
        query: Select = select(Member)
        condition = all_of(username_eq(username), age_eq(age))
        if condition is not None:
            query = query.where(condition)

        result = await db.execute(query.order_by(Member.id))
        return list(result.scalars().all())

    # ── 동적 검색 (Dynamic search) ────────────────────────────

    def _member_team_query(self, condition: MemberSearchCondition) -> Select:
        """회원 LEFT JOIN 팀 프로젝션 쿼리 — Member left-joined with team, projected."""
        return (
            select(
                Member.id.label("member_id"),
                Member.username,
                Member.age,
                Team.id.label("team_id"),
                Team.name.label("team_name"),
            )
            .select_from(Member)
            .outerjoin(Member.team)
            .where(*member_search_predicates(condition))
        )

    def _count_query(self, condition: MemberSearchCondition) -> Select:
        """검색 조건의 COUNT 쿼리 — Count query sharing the search predicates."""
        return (
            select(func.count(Member.id))
            .select_from(Member)
            .outerjoin(Member.team)
            .where(*member_search_predicates(condition))
        )

    @staticmethod
    def _to_dtos(rows: Sequence[Any]) -> list[MemberTeamDto]:
        return [MemberTeamDto(**row._asdict()) for row in rows]

    async def search(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        sort: list[OrderSpec] | None = None,
    ) -> list[MemberTeamDto]:
        """검색 조건에 맞는 회원을 팀과 함께 조회합니다.

        Retrieve members matching the condition, left-joined with their team.
        Members without a team are included with null team fields.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 회원 검색 조건 (Member search condition)
            sort: 정렬 키 목록, 생략 시 회원 ID순 (Ordering keys; member ID when omitted)

        Returns:
            list[MemberTeamDto]: 회원-팀 프로젝션 목록 (Member/team projections)
        """
        query: Select = self._member_team_query(condition).order_by(
            *order_by_clauses(sort), Member.id
        )
        result = await db.execute(query)
        return self._to_dtos(result.all())

    async def search_unique(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
    ) -> MemberTeamDto | None:
        """검색 결과가 0개 또는 1개일 것을 기대하는 조회.

        Search expecting zero or one row.

        Raises:
            NonUniqueResultError: 두 건 이상 조회된 경우 (More than one row matched)
        """
        result = await db.execute(self._member_team_query(condition))
        try:
            row = result.one_or_none()
        except MultipleResultsFound as exc:
            raise NonUniqueResultError("Member search returned more than one result") from exc
        return MemberTeamDto(**row._asdict()) if row is not None else None

    async def count(self, db: AsyncSession, condition: MemberSearchCondition) -> int:
        """검색 조건에 맞는 전체 회원 수 (Total members matching the condition)."""
        return (await db.execute(self._count_query(condition))).scalar() or 0

    async def search_page_simple(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page_request: PageRequest,
    ) -> Page[MemberTeamDto]:
        """페이지 조회 — 항목 쿼리와 COUNT 쿼리를 항상 함께 실행합니다.

        Page through the search results, always running both the content
        query and the count query.
        """
        total: int = await self.count(db, condition)
        query: Select = apply_page(self._member_team_query(condition), page_request, Member.id)
        result = await db.execute(query)
        return Page[MemberTeamDto](
            items=self._to_dtos(result.all()),
            total=total,
            offset=page_request.offset,
            limit=page_request.limit,
        )

    async def search_page(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page_request: PageRequest,
    ) -> Page[MemberTeamDto]:
        """페이지 조회 — COUNT 쿼리는 필요할 때만 실행합니다.

        Page through the search results. The count query is skipped when the
        fetched page already proves the total (short first or last page).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 회원 검색 조건 (Member search condition)
            page_request: 페이지 요청 (Paging request)

        Returns:
            Page[MemberTeamDto]: 페이지 결과 (Page of member/team projections)
        """
        rows, total = await paginate(
            db,
            self._member_team_query(condition),
            page_request,
            count_query=self._count_query(condition),
            tiebreaker=Member.id,
        )
        return Page[MemberTeamDto](
            items=self._to_dtos(rows),
            total=total,
            offset=page_request.offset,
            limit=page_request.limit,
        )

    # ── 엔티티 정렬/페이지 (Entity ordering and paging) ──────────

    async def find_ordered(
        self,
        db: AsyncSession,
        sort: list[OrderSpec],
        age: int | None = None,
    ) -> list[Member]:
        """정렬 키를 순서대로 적용해 회원을 조회합니다.

        Retrieve members ordered by the given keys, optionally only those of
        one age.
        """
        query: Select = select(Member).outerjoin(Member.team)
        age_condition = age_eq(age)
        if age_condition is not None:
            query = query.where(age_condition)

        result = await db.execute(query.order_by(*order_by_clauses(sort), Member.id))
        return list(result.scalars().all())

    async def find_page(self, db: AsyncSession, page_request: PageRequest) -> Page[Member]:
        """회원 엔티티 페이지를 조회합니다 (Page of member entities)."""
        rows, total = await paginate(
            db, select(Member).outerjoin(Member.team), page_request, tiebreaker=Member.id
        )
        return Page[Member](
            items=[row[0] for row in rows],
            total=total,
            offset=page_request.offset,
            limit=page_request.limit,
        )

    # ── 집계 (Aggregation) ────────────────────────────────────

    async def aggregate(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
    ) -> AgeStatistics:
        """검색 조건에 맞는 회원의 나이를 집계합니다.

        Aggregate age (count, sum, avg, min, max) over the members matching
        the condition. Returns a single tuple, never a row list.
        """
        query: Select = (
            select(
                func.count(Member.id),
                func.sum(Member.age),
                func.avg(Member.age),
                func.min(Member.age),
                func.max(Member.age),
            )
            .select_from(Member)
            .outerjoin(Member.team)
            .where(*member_search_predicates(condition))
        )
        count, total_age, avg_age, min_age, max_age = (await db.execute(query)).one()
        return AgeStatistics(
            count=count or 0,
            sum=total_age,
            avg=float(avg_age) if avg_age is not None else None,
            min=min_age,
            max=max_age,
        )

    async def team_age_averages(self, db: AsyncSession) -> list[TeamAgeAverage]:
        """팀 이름별 평균 나이를 조회합니다 (Average age grouped by team name)."""
        query: Select = (
            select(Team.name, func.avg(Member.age))
            .select_from(Member)
            .join(Member.team)
            .group_by(Team.name)
            .order_by(Team.name)
        )
        result = await db.execute(query)
        return [
            TeamAgeAverage(team_name=name, average_age=float(average))
            for name, average in result.all()
        ]

    # ── 조인 (Joins) ─────────────────────────────────────────

    async def find_by_team_name(self, db: AsyncSession, team_name: str) -> list[Member]:
        """팀 이름으로 회원을 조회합니다 (내부 조인).

        Retrieve members of the named team (inner join).
        """
        query: Select = (
            select(Member)
            .join(Member.team)
            .where(Team.name == team_name)
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_with_team_filtered(
        self, db: AsyncSession, team_name: str
    ) -> list[tuple[Member, Team | None]]:
        """모든 회원을 조회하되, 이름이 일치하는 팀만 조인합니다.

        Retrieve every member paired with its team only when the team has the
        given name; other members come back paired with None. The team filter
        lives in the ON clause of a left join, so no member is dropped.
        """
        query: Select = (
            select(Member, Team)
            .outerjoin(Team, and_(Member.team_id == Team.id, Team.name == team_name))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return [(member, team) for member, team in result.all()]

    async def find_with_team(self, db: AsyncSession, username: str) -> Member | None:
        """팀을 같은 쿼리에서 함께 로드하는 페치 조인.

        Fetch join: load the member and its team in one query so the team is
        readable after the session scope ends.
        """
        query: Select = (
            select(Member)
            .join(Member.team)
            .options(contains_eager(Member.team))
            .where(Member.username == username)
        )
        return await self.fetch_one(db, query)

    async def get_with_team(self, db: AsyncSession, member_id: int) -> Member:
        """ID로 회원을 조회하며 팀을 함께 로드합니다 (팀 없는 회원 포함).

        Retrieve a member by ID with its team loaded through a left join;
        ``team`` is None for members without one. Already-loaded instances
        are refreshed from the row.

        Raises:
            NotFoundError: 회원이 없는 경우 (No member with that ID)
        """
        query: Select = (
            select(Member)
            .outerjoin(Member.team)
            .options(contains_eager(Member.team))
            .where(Member.id == member_id)
            .execution_options(populate_existing=True)
        )
        return await self.fetch_single(db, query)

    # ── 서브쿼리 (Subqueries) ─────────────────────────────────

    async def find_oldest(self, db: AsyncSession) -> list[Member]:
        """나이가 가장 많은 회원을 조회합니다 (Members with the maximum age)."""
        member_sub = aliased(Member, name="member_sub")
        query: Select = (
            select(Member)
            .where(Member.age == select(func.max(member_sub.age)).scalar_subquery())
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_at_or_above_average_age(self, db: AsyncSession) -> list[Member]:
        """평균 나이 이상인 회원을 조회합니다 (Members at or above the average age)."""
        member_sub = aliased(Member, name="member_sub")
        query: Select = (
            select(Member)
            .where(Member.age >= select(func.avg(member_sub.age)).scalar_subquery())
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_by_age_in_subquery(self, db: AsyncSession, min_age: int) -> list[Member]:
        """IN 서브쿼리 — 나이가 min_age 초과인 회원 (Members whose age is above min_age, via IN)."""
        member_sub = aliased(Member, name="member_sub")
        query: Select = (
            select(Member)
            .where(Member.age.in_(select(member_sub.age).where(member_sub.age > min_age)))
            .order_by(Member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def usernames_with_average_age(self, db: AsyncSession) -> list[UsernameAverageAge]:
        """SELECT 절 서브쿼리 — 회원 이름과 전체 평균 나이.

        Scalar subquery in the SELECT list: each username paired with the
        average age over all members.
        """
        member_sub = aliased(Member, name="member_sub")
        average = select(func.avg(member_sub.age)).scalar_subquery()
        query: Select = select(Member.username, average.label("average_age")).order_by(Member.id)
        result = await db.execute(query)
        return [
            UsernameAverageAge(username=username, average_age=float(avg_age))
            for username, avg_age in result.all()
        ]

    # ── CASE / 프로젝션 (CASE and projections) ─────────────────

    async def age_labels(self, db: AsyncSession) -> list[str]:
        """나이를 라벨로 변환합니다 (10 → 열살, 20 → 스무살, 그 외 → 기타)."""
        label = case(
            (Member.age == 10, "열살"),
            (Member.age == 20, "스무살"),
            else_="기타",
        )
        result = await db.execute(select(label).order_by(Member.id))
        return list(result.scalars().all())

    async def usernames(self, db: AsyncSession) -> list[str | None]:
        result = await db.execute(select(Member.username).order_by(Member.id))
        return list(result.scalars().all())

    async def username_age_tuples(self, db: AsyncSession) -> list[tuple[str | None, int]]:
        result = await db.execute(select(Member.username, Member.age).order_by(Member.id))
        return [(username, age) for username, age in result.all()]

    async def member_dtos(self, db: AsyncSession) -> list[MemberDto]:
        result = await db.execute(select(Member.username, Member.age).order_by(Member.id))
        return [MemberDto(**row._asdict()) for row in result.all()]

    async def user_dtos(self, db: AsyncSession) -> list[UserDto]:
        """username을 name 별칭으로 조회합니다 (Username projected under the alias ``name``)."""
        result = await db.execute(
            select(Member.username.label("name"), Member.age).order_by(Member.id)
        )
        return [UserDto(**row._asdict()) for row in result.all()]

    # ── 벌크 연산 (Bulk operations) ─────────────────────────────

    async def bulk_set_username(
        self, db: AsyncSession, new_value: str, age_less_than: int
    ) -> int:
        """나이가 기준 미만인 회원의 이름을 일괄 변경합니다.

        Set the username of every member younger than ``age_less_than``
        directly in storage. Objects already loaded in the session are not
        touched; the caller must expire them.

        Returns:
            int: 영향받은 행 수 (Affected row count)
        """
        stmt = (
            update(Member)
            .where(Member.age < age_less_than)
            .values(username=new_value)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount

    async def bulk_add_age(self, db: AsyncSession, amount: int) -> int:
        """모든 회원의 나이에 amount를 더합니다 (Add ``amount`` to every member's age)."""
        stmt = (
            update(Member)
            .values(age=Member.age + amount)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount

    async def bulk_delete_older_than(self, db: AsyncSession, age: int) -> int:
        """나이가 기준 초과인 회원을 일괄 삭제합니다 (Delete members older than ``age``)."""
        stmt = (
            delete(Member)
            .where(Member.age > age)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
