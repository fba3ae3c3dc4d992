"""Receive Route: the offeree accepts a pending offer and becomes the owner.

Invariants:
    - Only the named offeree may receive (403 otherwise)
    - A missing, cancelled or already-accepted offer answers 404
    - Response is the game after transfer (new owner, incremented previous_owners)
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user_id, get_exchange_engine
from app.core.domain_types import GameId, UserId
from app.schemas.game import GameResponse
from app.services.exchange_engine import ExchangeEngine

router = APIRouter(prefix="/api/v1/receive", tags=["exchange"])


@router.post("/{game_id}", response_model=GameResponse)
async def receive_game(
    game_id: int,
    user_id: UserId = Depends(get_current_user_id),
    engine: ExchangeEngine = Depends(get_exchange_engine),
):
    game = await engine.accept_offer(user_id, GameId(game_id))
    return GameResponse.from_model(game)
