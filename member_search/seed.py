"""초기 데이터 시드 스크립트 — 팀과 샘플 회원 생성.

Seed script — Creates two teams and sample members.
Run this script once to bootstrap the database with sample data.

Usage:
    python -m member_search.seed

Creates:
    - 2개 팀: teamA, teamB (2 teams)
    - 100명 회원: member0 ~ member99, 나이 = 번호, 짝수는 teamA, 홀수는 teamB
      (100 members; age equals the index; even index in teamA, odd in teamB)
"""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from member_search.database import async_session, engine, Base, session_scope
from member_search.models import Member, Team

SAMPLE_MEMBER_COUNT: int = 100


async def seed_members(db: AsyncSession, member_count: int = SAMPLE_MEMBER_COUNT) -> bool:
    """세션에 샘플 팀/회원을 추가합니다.

    Insert the sample teams and members into the given session.

    Idempotent: 팀이 하나라도 있으면 건너뜁니다 (Skips if any team exists).

    Returns:
        bool: 시드 수행 여부 (Whether anything was inserted)
    """
    result = await db.execute(select(Team).limit(1))
    if result.scalar_one_or_none():
        return False

    team_a: Team = Team("teamA")
    team_b: Team = Team("teamB")
    db.add_all([team_a, team_b])

    for i in range(member_count):
        selected_team: Team = team_a if i % 2 == 0 else team_b
        db.add(Member(f"member{i}", i, selected_team))

    await db.flush()
    return True


async def seed(
    target_engine: AsyncEngine = engine,
    factory: async_sessionmaker[AsyncSession] = async_session,
) -> None:
    """데이터베이스를 샘플 데이터로 시드합니다.

    Seed the database with sample data.
    Creates tables if they don't exist, then inserts teams and members.
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_scope(factory) as db:
        inserted: bool = await seed_members(db)

    if inserted:
        print(f"Seeded: 2 teams, {SAMPLE_MEMBER_COUNT} members")
    else:
        print("Already seeded. Skipping.")


if __name__ == "__main__":
    asyncio.run(seed())
