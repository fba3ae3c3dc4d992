"""Exchange ORM: a pending offer to transfer one game to a named user.

Invariants:
    - game_id is the PRIMARY KEY: the database, not the application, guarantees
      at most one pending offer per game
    - Rows are ephemeral: deleted on acceptance or cancellation, no history kept
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Exchange(Base):
    __tablename__ = "exchanges"

    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True,
    )
    to_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False,
    )
