"""Ownership Guard: decides whether a user may mutate a given game.

Invariants:
    - Read-only; re-evaluated on every request, so a transfer takes effect immediately
    - Existence is checked before ownership
    - require_owner is an early, unlocked answer; writers repeat the check with
      require_owner_locked inside their transaction before touching any row

Design Decisions:
    - Two entry points over one verdict: the unlocked check keeps precondition
      order (and skips needless work), the locked one makes the write safe
      against a transfer committing in between
"""

from app.core.domain_types import AccessDecision, GameId, UserId
from app.core.enforce_ownership import access_error, decide_access
from app.core.repository_protocols import ItemStore


class OwnershipGuard:
    def __init__(self, items: ItemStore):
        self.items = items

    async def authorize(self, user_id: UserId, game_id: GameId) -> AccessDecision:
        owner_id = await self.items.get_owner_id(game_id)
        return decide_access(user_id, owner_id)

    async def require_owner(self, user_id: UserId, game_id: GameId) -> None:
        """Raise ResourceNotFoundError / ForbiddenError unless user_id owns the game."""
        decision = await self.authorize(user_id, game_id)
        if error := access_error(decision, user_id, game_id):
            raise error

    async def require_owner_locked(self, user_id: UserId, game_id: GameId) -> None:
        """Same verdict, read under a row lock; call inside atomic()."""
        owner_id = await self.items.lock_owner(game_id)
        if error := access_error(decide_access(user_id, owner_id), user_id, game_id):
            raise error
