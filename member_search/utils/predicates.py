"""동적 WHERE 조건 조합 유틸리티.

Dynamic predicate composition for member queries.
Each factory returns a SQL boolean expression, or None when its input is
absent, so callers can pass the results straight to ``where()`` after
dropping the Nones. All present predicates are combined with AND.
"""

from collections.abc import Callable
from typing import Any

from sqlalchemy import ColumnElement, and_

from member_search.models import Member, Team
from member_search.schemas.member import MemberSearchCondition

Predicate = ColumnElement[bool]


def has_text(value: str | None) -> bool:
    """공백이 아닌 문자열인지 확인합니다 (True for non-blank strings)."""
    return value is not None and value.strip() != ""


def username_eq(username: str | None) -> Predicate | None:
    return Member.username == username if has_text(username) else None


def team_name_eq(team_name: str | None) -> Predicate | None:
    return Team.name == team_name if has_text(team_name) else None


def age_eq(age: int | None) -> Predicate | None:
    return Member.age == age if age is not None else None


def age_goe(age: int | None) -> Predicate | None:
    """나이 >= age (None이면 조건 없음)."""
    return Member.age >= age if age is not None else None


def age_loe(age: int | None) -> Predicate | None:
    """나이 <= age (None이면 조건 없음)."""
    return Member.age <= age if age is not None else None


def all_of(*predicates: Predicate | None) -> Predicate | None:
    """존재하는 조건만 AND로 결합합니다.

    Combine the present predicates with AND.

    Returns:
        Predicate | None: 결합된 조건, 모두 없으면 None
                          (Combined predicate, or None when nothing is present)
    """
    present: list[Predicate] = [p for p in predicates if p is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return and_(*present)


def member_search_predicates(condition: MemberSearchCondition) -> list[Predicate]:
    """검색 조건에서 활성화된 조건 목록을 만듭니다.

    Build the active predicates for a search condition.
    The result depends only on the condition's values, always in the order
    username, team_name, age_goe, age_loe.

    Args:
        condition: 회원 검색 조건 (Member search condition)

    Returns:
        list[Predicate]: 활성 조건 목록, 비어 있으면 필터 없음
                         (Active predicates; empty means unfiltered)
    """
    # (값, 조건 팩토리) 쌍 — (value, predicate factory) pairs folded in field order
    factories: list[tuple[Any, Callable[[Any], Predicate | None]]] = [
        (condition.username, username_eq),
        (condition.team_name, team_name_eq),
        (condition.age_goe, age_goe),
        (condition.age_loe, age_loe),
    ]
    predicates: list[Predicate] = []
    for value, factory in factories:
        predicate = factory(value)
        if predicate is not None:
            predicates.append(predicate)
    return predicates
