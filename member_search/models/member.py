"""회원 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - members: 회원 (Members, optionally belonging to one team)
"""

from typing import Any

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from member_search.database import Base
from member_search.models.team import Team


class Member(Base):
    """회원 모델 — 선택적으로 하나의 팀에 소속.

    Member model — Many-to-one reference to an owning Team.
    A member may have no team; the team reference is used for read
    filtering and projection only.

    Attributes:
        id: 고유 식별자 (Surrogate primary key)
        username: 회원 이름 (Username, nullable)
        age: 나이 (Age)
        team_id: 소속 팀 FK (Owning team foreign key, nullable)

    Relationships:
        team: 소속 팀 (Owning team)
    """

    __tablename__ = "members"

    # 회원 고유 식별자 — Member surrogate key (autoincrement)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 회원 이름 — Username (nullable, 이름 없는 회원 허용)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 나이 — Age in years
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 소속 팀 FK — Owning team (SET NULL: 팀 삭제 시 회원은 팀 없이 유지)
    team_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # 관계 — Relationships
    team = relationship("Team", back_populates="members")

    def __init__(
        self,
        username: str | None = None,
        age: int = 0,
        team: Team | None = None,
        **kwargs: Any,
    ) -> None:
        # 나머지 컬럼(id, team_id 등)은 기본 생성자로 — other mapped columns go to the declarative constructor
        super().__init__(username=username, age=age, **kwargs)
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """소속 팀을 변경합니다. 양방향 관계를 함께 갱신합니다.

        Move the member to another team, keeping both sides of the
        relationship in sync.
        """
        # back_populates가 team.members에 추가 — back_populates appends to team.members
        self.team = team

    def __repr__(self) -> str:
        # team은 출력하지 않음 — never touch the team association here
        return f"Member(id={self.id}, username={self.username}, age={self.age})"
