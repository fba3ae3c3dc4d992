"""ORM Models: SQLAlchemy declarative models for users, sessions, games and exchanges.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every game has exactly one owner (games.owned_by NOT NULL)
    - exchanges.game_id is the primary key: one pending offer per game

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.user import User  # noqa: F401
from app.models.session_token import SessionToken  # noqa: F401
from app.models.game import Game, GamePlatform  # noqa: F401
from app.models.exchange import Exchange  # noqa: F401
