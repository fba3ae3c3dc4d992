"""Game Service: listing and maintaining games, guarded by ownership.

Invariants:
    - Every mutation of an existing game passes the Ownership Guard first,
      so a former owner loses write access the moment a transfer commits
    - Deleting a game removes its platform tags and any pending offer atomically
    - The owner is re-checked under the game row lock inside each write
      transaction, so a request that overlaps a transfer cannot touch the
      new owner's game
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import GameId, UserId
from app.core.errors import ErrorContext, ResourceNotFoundError
from app.core.repository_protocols import ExchangeStore, GameLike, ItemStore
from app.infrastructure.database import atomic
from app.services.ownership_guard import OwnershipGuard

logger = logging.getLogger(__name__)


class GameService:
    def __init__(
        self,
        db: AsyncSession,
        items: ItemStore,
        exchanges: ExchangeStore,
        guard: OwnershipGuard,
    ):
        self.db = db
        self.items = items
        self.exchanges = exchanges
        self.guard = guard

    async def add_game(self, owner_id: UserId, fields: dict) -> GameLike:
        async with atomic(self.db):
            game = await self.items.add(owner_id, fields)
        logger.info(
            f"Game {game.id} listed", extra={"user_id": owner_id, "game_id": game.id},
        )
        return game

    async def get_game(self, game_id: GameId) -> GameLike:
        game = await self.items.get(game_id)
        if game is None:
            raise ResourceNotFoundError(
                "Game", str(game_id), ErrorContext(game_id=game_id),
            )
        return game

    async def replace_game(
        self, requester_id: UserId, game_id: GameId, fields: dict,
    ) -> GameLike:
        await self.guard.require_owner(requester_id, game_id)
        async with atomic(self.db):
            await self.guard.require_owner_locked(requester_id, game_id)
            await self.items.replace(game_id, fields)
        return await self.items.get(game_id)

    async def patch_game(
        self, requester_id: UserId, game_id: GameId, fields: dict,
    ) -> GameLike:
        await self.guard.require_owner(requester_id, game_id)
        if fields:
            async with atomic(self.db):
                await self.guard.require_owner_locked(requester_id, game_id)
                await self.items.patch(game_id, fields)
        return await self.items.get(game_id)

    async def delete_game(self, requester_id: UserId, game_id: GameId) -> GameLike:
        """Delete and return the game as it was."""
        await self.guard.require_owner(requester_id, game_id)
        game = await self.items.get(game_id)
        async with atomic(self.db):
            await self.guard.require_owner_locked(requester_id, game_id)
            await self.exchanges.delete(game_id)
            await self.items.delete(game_id)
        logger.info(
            f"Game {game_id} deleted",
            extra={"user_id": requester_id, "game_id": game_id},
        )
        return game
