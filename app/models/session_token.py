"""SessionToken ORM: bearer credential -> user mapping.

Invariants:
    - token is the primary key (lookups by token are the hot path)
    - user_id is unique: at most one active token per user, login overwrites it
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class SessionToken(Base):
    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, unique=True,
    )
