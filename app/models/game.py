"""Game ORM: a physical game copy and its platform tags.

Invariants:
    - owned_by always references exactly one user
    - previous_owners is a non-negative transfer counter, bumped only by a transfer
    - condition and platform names are stored lower-case
    - platforms are owned by the game (cascade delete-orphan)

Design Decisions:
    - Platforms in a separate (platform, game_id) table: a game is sold on a set of
      platforms and the composite primary key prevents duplicate tags
    - lazy="selectin" on platforms: async sessions cannot lazy-load on attribute access
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Game(Base):
    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    publisher: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    condition: Mapped[str] = mapped_column(String(4), nullable=False)
    previous_owners: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    owned_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )

    platforms: Mapped[list["GamePlatform"]] = relationship(
        "GamePlatform", back_populates="game",
        cascade="all, delete-orphan", lazy="selectin",
    )

    @property
    def platform_names(self) -> list[str]:
        return sorted(p.platform for p in self.platforms)


class GamePlatform(Base):
    __tablename__ = "platforms_games"

    platform: Mapped[str] = mapped_column(String(30), primary_key=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True,
    )

    game: Mapped["Game"] = relationship("Game", back_populates="platforms")
