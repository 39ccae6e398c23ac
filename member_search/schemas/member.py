"""회원 검색 관련 Pydantic 스키마 정의.

Member search Pydantic schema definitions.
Includes the optional search condition, ordering and paging requests,
and the read-only projection shapes returned by the query layer.
Projection models are built fresh per query and never persisted.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# 정렬 가능한 필드 — Sortable projection fields
SortField = Literal["member_id", "username", "age", "team_id", "team_name"]


# === 검색 조건 (Search condition) ===

class MemberSearchCondition(BaseModel):
    """회원 검색 조건 — 모든 필드는 선택 사항.

    Member search condition. Every field is optional; an unset field
    means "no constraint on that dimension". Blank strings count as unset.

    Attributes:
        username: 회원 이름 일치 (Username equality)
        team_name: 팀 이름 일치 (Team name equality)
        age_goe: 나이 하한, 이상 (Age greater than or equal)
        age_loe: 나이 상한, 이하 (Age less than or equal)
    """

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None
    age_loe: int | None = None

    model_config = {"validate_assignment": True}


# === 프로젝션 (Projections) ===

class MemberTeamDto(BaseModel):
    """회원 + 팀 프로젝션.

    Member joined with its team. Team fields are None for members
    without a team.
    """

    member_id: int
    username: str | None = None
    age: int
    team_id: int | None = None
    team_name: str | None = None


class MemberDto(BaseModel):
    """회원 이름/나이 프로젝션 (Username and age projection)."""

    username: str | None = None
    age: int


class UserDto(BaseModel):
    """회원 이름을 name으로 노출하는 프로젝션 (Username exposed as ``name``)."""

    name: str | None = None
    age: int


class AgeStatistics(BaseModel):
    """나이 집계 결과 — 단일 튜플.

    Age aggregate over the matching members. ``count`` is 0 and the other
    fields are None when nothing matches.
    """

    count: int
    sum: int | None = None
    avg: float | None = None
    min: int | None = None
    max: int | None = None


class TeamAgeAverage(BaseModel):
    """팀별 평균 나이 (Average member age per team)."""

    team_name: str
    average_age: float


class UsernameAverageAge(BaseModel):
    """회원 이름과 전체 평균 나이 (Username with the overall average age)."""

    username: str | None = None
    average_age: float


# === 정렬/페이지 (Ordering and paging) ===

class OrderSpec(BaseModel):
    """정렬 키 하나 — (필드, 방향, NULL 위치).

    One ordering key. When ``nulls`` is unset, ascending string fields
    sort NULLs last and everything else keeps the database default.
    """

    field: SortField
    direction: Literal["asc", "desc"] = "asc"
    nulls: Literal["first", "last"] | None = None


class PageRequest(BaseModel):
    """페이지 요청 — 0부터 시작하는 offset과 선택적 limit.

    Paging request. ``offset`` is 0-based; ``limit`` None means unbounded.
    Ordering keys are applied before offset/limit.
    """

    offset: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=1)
    sort: list[OrderSpec] = Field(default_factory=list)

    @classmethod
    def of(cls, page: int, size: int, sort: list[OrderSpec] | None = None) -> "PageRequest":
        """1부터 시작하는 페이지 번호로 요청을 만듭니다 (Build from a 1-based page number)."""
        if page < 1:
            raise ValueError("page must be >= 1")
        return cls(offset=(page - 1) * size, limit=size, sort=sort or [])


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result. ``total`` counts every matching row regardless of
    offset/limit.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        offset: 요청 offset (Requested offset)
        limit: 요청 limit (Requested limit, None = unbounded)
    """

    items: list[T]
    total: int
    offset: int = 0
    limit: int | None = None

    # ORM 엔티티 페이지 허용 — allows pages of ORM entities as well as DTOs
    model_config = {"arbitrary_types_allowed": True}
