"""Exchange Store: pending offers keyed by game id over an explicit AsyncSession.

Invariants:
    - insert_if_absent relies on the exchanges primary key, never on a prior read:
      of two racing inserts for one game exactly one returns True
    - A uniqueness violation rolls back the caller's transaction and is reported
      as False (callers raise ConflictError), never as a DatabaseError
    - delete() reports whether a row was actually removed, so a concurrent
      cancel/accept is observable to the loser
    - Never commits; the calling service owns the transaction
"""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import GameId, UserId
from app.models.exchange import Exchange

logger = logging.getLogger(__name__)


class SqlExchangeStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_if_absent(self, game_id: GameId, to_user_id: UserId) -> bool:
        try:
            await self.db.execute(
                insert(Exchange).values(game_id=game_id, to_user_id=to_user_id),
            )
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "Exchange insert lost the race: offer already exists",
                extra={"game_id": game_id},
            )
            return False
        return True

    async def get(self, game_id: GameId) -> Exchange | None:
        result = await self.db.execute(
            select(Exchange)
            .where(Exchange.game_id == game_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def delete(
        self, game_id: GameId, to_user_id: UserId | None = None,
    ) -> bool:
        stmt = delete(Exchange).where(Exchange.game_id == game_id)
        if to_user_id is not None:
            stmt = stmt.where(Exchange.to_user_id == to_user_id)
        result = await self.db.execute(
            stmt.execution_options(synchronize_session=False),
        )
        return result.rowcount > 0
