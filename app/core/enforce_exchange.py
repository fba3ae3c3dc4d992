"""Exchange Enforcement: precondition checks for the offer/accept state machine.

States per game (derived, never stored): Owned(owner) <-> OfferPending(owner, offeree)
-> Owned(offeree). The presence of an exchange row is the only distinguishing fact.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error on violation, None on success
    - validate_* chain their checks in the documented order; first error wins
    - The no-pending-offer check is advisory; the store's uniqueness
      constraint is the authority at insert time

Design Decisions:
    - Errors returned, not raised: callers stage their reads between checks
      (game first, then offeree, then exchange) and raise the first error found
"""

from app.core.domain_types import GameId, OfferState, UserId
from app.core.errors import (
    ConflictError,
    ErrorContext,
    ExchangeError,
    ForbiddenError,
    InvalidRequestError,
    ResourceNotFoundError,
)
from app.core.repository_protocols import ExchangeLike, GameLike, UserLike


def derive_offer_state(exchange: ExchangeLike | None) -> OfferState:
    return OfferState.OFFER_PENDING if exchange else OfferState.OWNED


def check_game_exists(
    game: GameLike | None, game_id: GameId,
) -> ExchangeError | None:
    if game is None:
        return ResourceNotFoundError(
            "Game", str(game_id), ErrorContext(game_id=game_id),
        )
    return None


def check_offeree_exists(
    offeree: UserLike | None, email: str,
) -> ExchangeError | None:
    if offeree is None:
        return ResourceNotFoundError("User", email)
    return None


def check_not_self_transfer(
    requester_id: UserId, offeree: UserLike, game_id: GameId,
) -> ExchangeError | None:
    """Rule 2: an offer's offeree must differ from the owner."""
    if offeree.id == requester_id:
        return InvalidRequestError(
            "Cannot offer a game to yourself", field="to_user_email",
            context=ErrorContext(user_id=requester_id, game_id=game_id),
        )
    return None


def check_no_pending_offer(
    exchange: ExchangeLike | None, game_id: GameId,
) -> ExchangeError | None:
    """Rule 1: at most one offer per game."""
    if exchange is not None:
        return ConflictError(
            "An offer already exists for this game",
            ErrorContext(game_id=game_id),
        )
    return None


def check_offer_exists(
    exchange: ExchangeLike | None, game_id: GameId,
) -> ExchangeError | None:
    if exchange is None:
        return ResourceNotFoundError(
            "Exchange", str(game_id), ErrorContext(game_id=game_id),
        )
    return None


def check_is_offeree(
    requester_id: UserId, exchange: ExchangeLike,
) -> ExchangeError | None:
    """Rule 4: only the named offeree may accept."""
    if exchange.to_user_id != requester_id:
        return ForbiddenError(
            "Only the offeree may accept this offer",
            ErrorContext(user_id=requester_id, game_id=exchange.game_id),
        )
    return None


def check_can_read_offer(
    requester_id: UserId, game: GameLike, exchange: ExchangeLike,
) -> ExchangeError | None:
    """Owner and offeree may read a pending offer; everyone else is denied."""
    if requester_id not in (game.owned_by, exchange.to_user_id):
        return ForbiddenError(
            "Only the owner or the offeree may view this offer",
            ErrorContext(user_id=requester_id, game_id=game.id),
        )
    return None


# ─── Chains ──────────────────────────────────────────────────────

def validate_offeree(
    requester_id: UserId, offeree: UserLike | None, email: str, game_id: GameId,
) -> ExchangeError | None:
    """Offeree email resolves, then offeree is not the requester."""
    return (
        check_offeree_exists(offeree, email)
        or check_not_self_transfer(requester_id, offeree, game_id)
    )


def validate_accept(
    requester_id: UserId,
    game: GameLike | None,
    exchange: ExchangeLike | None,
    game_id: GameId,
) -> ExchangeError | None:
    """Game exists, offer exists, requester is the offeree."""
    return (
        check_game_exists(game, game_id)
        or check_offer_exists(exchange, game_id)
        or check_is_offeree(requester_id, exchange)
    )


def validate_read(
    requester_id: UserId,
    game: GameLike | None,
    exchange: ExchangeLike | None,
    game_id: GameId,
) -> ExchangeError | None:
    """Game exists, offer exists, requester is a party to it."""
    return (
        check_game_exists(game, game_id)
        or check_offer_exists(exchange, game_id)
        or check_can_read_offer(requester_id, game, exchange)
    )
