"""Initial schema: users, sessions, games, platforms_games, exchanges.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(256), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("street_address", sa.String(100), nullable=False),
    )

    op.create_table(
        "sessions",
        sa.Column("token", sa.String(128), primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False, unique=True),
    )

    op.create_table(
        "games",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("publisher", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("condition", sa.String(4), nullable=False),
        sa.Column("previous_owners", sa.Integer, nullable=False, server_default="0"),
        sa.Column("owned_by", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
    )
    op.create_index("ix_games_owned_by", "games", ["owned_by"])

    op.create_table(
        "platforms_games",
        sa.Column("platform", sa.String(30), primary_key=True),
        sa.Column(
            "game_id", sa.Integer,
            sa.ForeignKey("games.id", ondelete="CASCADE"), primary_key=True,
        ),
    )

    op.create_table(
        "exchanges",
        sa.Column(
            "game_id", sa.Integer,
            sa.ForeignKey("games.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("to_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("exchanges")
    op.drop_table("platforms_games")
    op.drop_index("ix_games_owned_by", table_name="games")
    op.drop_table("games")
    op.drop_table("sessions")
    op.drop_table("users")
