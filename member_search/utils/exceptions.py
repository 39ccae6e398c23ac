"""쿼리 결과 예외 클래스 모듈.

Query result exception classes module.
Raised when a fetch expecting a bounded number of rows gets a different
cardinality. Storage and connectivity errors from SQLAlchemy are never
wrapped here; they propagate to the caller unchanged.

Usage:
    from member_search.utils.exceptions import NotFoundError, NonUniqueResultError
    raise NotFoundError("Member not found")
"""


class QueryError(Exception):
    """쿼리 계층 예외의 부모 클래스.

    Base class for query-layer errors.

    Args:
        detail: 오류 메시지 (Error message)
    """

    default_detail: str = "Query failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail: str = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(QueryError):
    """정확히 하나를 기대했으나 결과가 없을 때 사용.

    Raised when exactly one row was expected and none matched.
    """

    default_detail = "Resource not found"


class NonUniqueResultError(QueryError):
    """0개 또는 1개를 기대했으나 여러 건이 조회될 때 사용.

    Raised when zero or one row was expected and more than one matched.
    """

    default_detail = "Query returned more than one result"
