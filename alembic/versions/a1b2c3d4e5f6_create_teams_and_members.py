"""create_teams_and_members

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 10:00:00.000000

팀(teams)과 회원(members) 테이블 생성.
Create teams and members tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # teams — 회원이 소속되는 팀
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
    )

    # members — 회원 (팀 없이 존재 가능, 팀 삭제 시 SET NULL)
    # Members may exist without a team; deleting a team nulls the reference
    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('age', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
    )

    # 인덱스 — Index for the member → team join
    op.create_index('ix_members_team_id', 'members', ['team_id'])


def downgrade() -> None:
    op.drop_index('ix_members_team_id', table_name='members')
    op.drop_table('members')
    op.drop_table('teams')
