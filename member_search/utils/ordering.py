"""정렬 조건 변환 유틸리티.

Converts OrderSpec keys into ORDER BY expressions for member/team queries.
Keys are applied in the given order: the first is the primary sort key,
later keys only break ties.
"""

from sqlalchemy import ColumnElement, UnaryExpression

from member_search.models import Member, Team
from member_search.schemas.member import OrderSpec

# 정렬 필드 → 컬럼 매핑 — Sort field to column mapping
_COLUMNS: dict[str, ColumnElement] = {
    "member_id": Member.id,
    "username": Member.username,
    "age": Member.age,
    "team_id": Team.id,
    "team_name": Team.name,
}

# 문자열 필드 — 오름차순 기본값은 NULLS LAST
_STRING_FIELDS: frozenset[str] = frozenset({"username", "team_name"})


def order_by_clause(spec: OrderSpec) -> UnaryExpression:
    """정렬 키 하나를 ORDER BY 식으로 변환합니다.

    Convert one ordering key into an ORDER BY expression.

    Args:
        spec: 정렬 키 (Ordering key)

    Returns:
        UnaryExpression: 방향과 NULL 위치가 적용된 식
                         (Expression with direction and null placement)
    """
    column = _COLUMNS[spec.field]
    clause: UnaryExpression = column.desc() if spec.direction == "desc" else column.asc()

    nulls = spec.nulls
    if nulls is None and spec.direction == "asc" and spec.field in _STRING_FIELDS:
        nulls = "last"

    if nulls == "last":
        return clause.nulls_last()
    if nulls == "first":
        return clause.nulls_first()
    return clause


def order_by_clauses(specs: list[OrderSpec] | None) -> list[UnaryExpression]:
    return [order_by_clause(spec) for spec in specs or []]
