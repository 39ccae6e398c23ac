"""회원 조회 서비스 테스트.

Member query service tests — paged search, single-result lookups,
aggregates and bulk updates followed by fresh reads.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.models import Member
from member_search.repositories.member_repository import member_repository
from member_search.schemas.member import MemberSearchCondition, OrderSpec, PageRequest
from member_search.services.member_query_service import member_query_service
from member_search.utils.exceptions import NonUniqueResultError, NotFoundError


class TestSearch:
    """페이지 검색 테스트."""

    async def test_search_without_arguments_returns_everything(self, db: AsyncSession, members):
        page = await member_query_service.search(db)
        assert [dto.username for dto in page.items] == ["member1", "member2", "member3", "member4"]
        assert page.total == 4
        assert page.offset == 0
        assert page.limit is None

    async def test_search_first_page(self, db: AsyncSession, members):
        page = await member_query_service.search(
            db, MemberSearchCondition(), PageRequest.of(1, 3)
        )
        assert len(page.items) == 3
        assert page.total == 4

    async def test_search_filtered_and_sorted(self, db: AsyncSession, members):
        request = PageRequest(offset=0, limit=10, sort=[OrderSpec(field="age", direction="desc")])
        page = await member_query_service.search(db, MemberSearchCondition(age_goe=20), request)
        assert [dto.age for dto in page.items] == [40, 30, 20]
        assert page.total == 3

    async def test_search_sorts_null_usernames_last_by_default(self, db: AsyncSession, members):
        """이름 오름차순은 기본적으로 NULL을 마지막에."""
        db.add_all([Member(None, 100), Member("member5", 100), Member("member6", 100)])
        await db.flush()

        request = PageRequest(
            sort=[OrderSpec(field="age", direction="desc"), OrderSpec(field="username")]
        )
        page = await member_query_service.search(db, MemberSearchCondition(age_goe=100), request)
        assert [dto.username for dto in page.items] == ["member5", "member6", None]
        assert page.total == 3

    async def test_search_page_by_username_desc(self, db: AsyncSession, members):
        request = PageRequest(
            offset=1, limit=2, sort=[OrderSpec(field="username", direction="desc")]
        )
        page = await member_query_service.search(db, MemberSearchCondition(), request)
        assert [dto.username for dto in page.items] == ["member3", "member2"]
        assert page.total == 4

    async def test_count_matches_search_total(self, db: AsyncSession, members):
        condition = MemberSearchCondition(team_name="teamB")
        page = await member_query_service.search(db, condition, PageRequest(limit=1))
        assert len(page.items) == 1
        assert page.total == await member_query_service.count(db, condition) == 2


class TestAggregates:
    """집계 테스트."""

    async def test_aggregate(self, db: AsyncSession, members):
        stats = await member_query_service.aggregate(db)
        assert (stats.count, stats.sum, stats.min, stats.max) == (4, 100, 10, 40)
        assert stats.avg == 25.0

    async def test_team_age_averages(self, db: AsyncSession, members):
        averages = await member_query_service.team_age_averages(db)
        assert {a.team_name: a.average_age for a in averages} == {"teamA": 15.0, "teamB": 35.0}


class TestSingleResult:
    """단건 조회 테스트."""

    async def test_get_member(self, db: AsyncSession, members):
        dto = await member_query_service.get_member(db, members[2].id)
        assert dto.username == "member3"
        assert dto.team_name == "teamB"
        assert dto.team_id == members[2].team_id

    async def test_get_member_without_team(self, db: AsyncSession, members):
        loner = await member_repository.save(db, Member("loner", 7))
        dto = await member_query_service.get_member(db, loner.id)
        assert dto.team_id is None
        assert dto.team_name is None

    async def test_get_member_not_found(self, db: AsyncSession, members):
        with pytest.raises(NotFoundError):
            await member_query_service.get_member(db, 999)

    async def test_find_member_by_username(self, db: AsyncSession, members):
        dto = await member_query_service.find_member_by_username(db, "member2")
        assert dto is not None
        assert dto.team_name == "teamA"
        assert await member_query_service.find_member_by_username(db, "nobody") is None

    async def test_find_member_by_blank_username(self, db: AsyncSession, members):
        assert await member_query_service.find_member_by_username(db, "  ") is None

    async def test_find_member_by_duplicate_username(self, db: AsyncSession, members):
        await member_repository.save(db, Member("member2", 99))
        with pytest.raises(NonUniqueResultError):
            await member_query_service.find_member_by_username(db, "member2")


class TestBulk:
    """벌크 변경 후 재조회 테스트."""

    async def test_bulk_set_username_then_fresh_read(self, db: AsyncSession, members):
        affected = await member_query_service.bulk_set_username(db, "비회원", 28)
        assert affected == 2

        # 엔티티 재조회도 저장소 값을 반영 — loaded objects were expired
        reloaded = await member_repository.find_all(db)
        assert [m.username for m in reloaded] == ["비회원", "비회원", "member3", "member4"]

        page = await member_query_service.search(db, MemberSearchCondition(username="비회원"))
        assert page.total == 2

    async def test_bulk_set_username_flushes_pending_changes(self, db: AsyncSession, members):
        db.add(Member("pending", 5))
        affected = await member_query_service.bulk_set_username(db, "young", 15)
        assert affected == 2
        assert await member_query_service.count(db, MemberSearchCondition(username="young")) == 2

    async def test_bulk_add_age(self, db: AsyncSession, members):
        assert await member_query_service.bulk_add_age(db, 1) == 4

        reloaded = await member_repository.find_all(db)
        assert [m.age for m in reloaded] == [11, 21, 31, 41]
        assert (await member_query_service.aggregate(db)).sum == 104
