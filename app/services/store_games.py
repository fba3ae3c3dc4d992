"""Item Store: games, platform tags and ownership over an explicit AsyncSession.

Invariants:
    - get() always re-reads the row (populate_existing): ownership is never
      served from a stale identity map after a transfer
    - lock_owner is the serialization point for every ownership-dependent write:
      create, cancel and accept of an offer and every game mutation lock the
      game row before writing (FOR UPDATE; SQLite serializes writers itself)
    - transfer_owner is ONE conditional UPDATE: owner change and counter
      increment cannot be observed apart, and a concurrent transfer makes it a no-op
    - Never commits; the calling service owns the transaction
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import GameId, UserId
from app.models.game import Game, GamePlatform

_SCALAR_FIELDS = ("name", "publisher", "year", "condition", "previous_owners")


class SqlItemStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, game_id: GameId) -> Game | None:
        result = await self.db.execute(
            select(Game)
            .where(Game.id == game_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_owner_id(self, game_id: GameId) -> UserId | None:
        result = await self.db.execute(
            select(Game.owned_by).where(Game.id == game_id),
        )
        owner_id = result.scalar_one_or_none()
        return UserId(owner_id) if owner_id is not None else None

    async def lock_owner(self, game_id: GameId) -> UserId | None:
        """Owner read that holds a row lock on the game until the transaction ends."""
        result = await self.db.execute(
            select(Game.owned_by).where(Game.id == game_id).with_for_update(),
        )
        owner_id = result.scalar_one_or_none()
        return UserId(owner_id) if owner_id is not None else None

    async def add(self, owner_id: UserId, fields: dict) -> Game:
        game = Game(
            owned_by=owner_id,
            **{k: fields[k] for k in _SCALAR_FIELDS if fields.get(k) is not None},
        )
        game.platforms = [
            GamePlatform(platform=name) for name in _unique(fields["platforms"])
        ]
        self.db.add(game)
        await self.db.flush()
        return game

    async def replace(self, game_id: GameId, fields: dict) -> None:
        game = await self.get(game_id)
        for key in _SCALAR_FIELDS:
            setattr(game, key, fields[key])
        if fields.get("platforms") is not None:
            _sync_platforms(game, fields["platforms"])
        await self.db.flush()

    async def patch(self, game_id: GameId, fields: dict) -> None:
        game = await self.get(game_id)
        for key in _SCALAR_FIELDS:
            if key in fields:
                setattr(game, key, fields[key])
        if fields.get("platforms") is not None:
            _sync_platforms(game, fields["platforms"])
        await self.db.flush()

    async def transfer_owner(
        self, game_id: GameId, previous_owner: UserId, new_owner: UserId,
    ) -> bool:
        result = await self.db.execute(
            update(Game)
            .where(Game.id == game_id, Game.owned_by == previous_owner)
            .values(
                owned_by=new_owner,
                previous_owners=Game.previous_owners + 1,
            )
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def delete(self, game_id: GameId) -> None:
        game = await self.get(game_id)
        if game is not None:
            await self.db.delete(game)
            await self.db.flush()


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


def _sync_platforms(game: Game, names: list[str]) -> None:
    """Keep rows whose tag survives, drop the rest, add the new ones."""
    wanted = _unique(names)
    kept = [p for p in game.platforms if p.platform in wanted]
    have = {p.platform for p in kept}
    game.platforms = kept + [
        GamePlatform(platform=name) for name in wanted if name not in have
    ]
