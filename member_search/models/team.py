"""팀 SQLAlchemy ORM 모델 정의.

Team SQLAlchemy ORM model definition.

Tables:
    - teams: 회원이 소속되는 팀 (Teams that members belong to)
"""

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from member_search.database import Base


class Team(Base):
    """팀 모델 — 회원 목록을 소유하는 엔티티.

    Team model — Owns a collection of members (one-to-many).
    A team's lifetime is independent of its members; deleting a team
    leaves its members in place with no team.

    Attributes:
        id: 고유 식별자 (Surrogate primary key)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 회원 목록 (Members of this team)
    """

    __tablename__ = "teams"

    # 팀 고유 식별자 — Team surrogate key (autoincrement)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 팀 이름 — Team display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 관계 — Relationships (회원 삭제 전파 없음, no delete cascade to members)
    members = relationship("Member", back_populates="team")

    def __init__(self, name: str | None = None, **kwargs: Any) -> None:
        super().__init__(name=name, **kwargs)

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name})"
