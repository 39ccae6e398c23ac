"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Applies ordering and OFFSET/LIMIT to a SELECT, and answers the total row
count either from the fetched page (when it is provable) or from a
separate COUNT query.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.schemas.member import PageRequest
from member_search.utils.ordering import order_by_clauses


def apply_page(
    query: Select[Any],
    page_request: PageRequest,
    tiebreaker: Any | None = None,
) -> Select[Any]:
    """정렬, OFFSET, LIMIT을 순서대로 적용합니다.

    Apply ORDER BY, then OFFSET, then LIMIT. ``tiebreaker`` is appended
    after the requested keys so pages are stable across calls.
    """
    clauses: list[Any] = list(order_by_clauses(page_request.sort))
    if tiebreaker is not None:
        clauses.append(tiebreaker)
    if clauses:
        query = query.order_by(*clauses)
    if page_request.offset:
        query = query.offset(page_request.offset)
    if page_request.limit is not None:
        query = query.limit(page_request.limit)
    return query


def count_of(query: Select[Any]) -> Select[Any]:
    """SELECT를 서브쿼리로 감싼 COUNT 쿼리를 만듭니다 (COUNT over the query as a subquery)."""
    return select(func.count()).select_from(query.order_by(None).subquery())


def resolve_total(offset: int, limit: int | None, content_size: int) -> int | None:
    """조회한 페이지만으로 전체 개수를 알 수 있으면 반환합니다.

    Derive the total from the fetched page when it is provable:
    the first page came back shorter than the limit, or a non-empty page
    past the first came back shorter than the limit (it is the last page).

    Returns:
        int | None: 전체 개수, 알 수 없으면 None (None means a COUNT query is needed)
    """
    is_short: bool = limit is None or content_size < limit
    if offset == 0:
        return content_size if is_short else None
    if content_size > 0 and is_short:
        return offset + content_size
    return None


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
    count_query: Select[Any] | None = None,
    tiebreaker: Any | None = None,
) -> tuple[Sequence[Any], int]:
    """페이지 항목을 조회하고 필요할 때만 COUNT 쿼리를 실행합니다.

    Fetch one page of rows and the total count. The COUNT query runs only
    when the total cannot be derived from the page itself.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: 정렬/페이지가 적용되지 않은 기본 쿼리 (Base query, no paging applied)
        page_request: 페이지 요청 (Paging request)
        count_query: 전용 COUNT 쿼리, None이면 기본 쿼리에서 생성
                     (Dedicated count query; derived from ``query`` when None)
        tiebreaker: 마지막 정렬 키 (Final ordering key appended after the requested ones)

    Returns:
        tuple[Sequence[Any], int]: (행 목록, 전체 개수) (Rows and total count)
    """
    result = await db.execute(apply_page(query, page_request, tiebreaker))
    rows: Sequence[Any] = result.all()

    total: int | None = resolve_total(page_request.offset, page_request.limit, len(rows))
    if total is None:
        total = (await db.execute(count_query if count_query is not None else count_of(query))).scalar() or 0

    return rows, total
