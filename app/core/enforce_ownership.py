"""Ownership Enforcement: pure verdicts on whether a user may mutate a game.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - Existence is decided before ownership (ITEM_NOT_FOUND beats FORBIDDEN)
    - Return error on violation, None on success

Design Decisions:
    - Decision enum separated from exception mapping: the guard reports a verdict,
      callers that must fail convert it with access_error()
"""

from app.core.domain_types import AccessDecision, GameId, UserId
from app.core.errors import (
    ErrorContext, ExchangeError, ForbiddenError, ResourceNotFoundError,
)


def decide_access(user_id: UserId, owner_id: UserId | None) -> AccessDecision:
    """Authorized iff the game exists and user_id is its owner."""
    if owner_id is None:
        return AccessDecision.ITEM_NOT_FOUND
    if owner_id != user_id:
        return AccessDecision.FORBIDDEN
    return AccessDecision.AUTHORIZED


def access_error(
    decision: AccessDecision, user_id: UserId, game_id: GameId,
) -> ExchangeError | None:
    """Map a negative decision to its error, None when authorized."""
    context = ErrorContext(user_id=user_id, game_id=game_id)
    if decision is AccessDecision.ITEM_NOT_FOUND:
        return ResourceNotFoundError("Game", str(game_id), context)
    if decision is AccessDecision.FORBIDDEN:
        return ForbiddenError(
            "User is not authorized to modify this game", context,
        )
    return None
