"""Exchange Routes: create, read and cancel the pending offer on a game.

Invariants:
    - POST is owner-only, answers 201; duplicate offer answers 409
    - GET is visible to the owner and the offeree, 403 for anyone else
    - DELETE is owner-only and leaves ownership untouched
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_current_user_id, get_exchange_engine
from app.core.domain_types import GameId, UserId
from app.schemas.exchange import ExchangeCreate, ExchangeResponse
from app.services.exchange_engine import ExchangeEngine

router = APIRouter(prefix="/api/v1/exchange", tags=["exchange"])


@router.post(
    "/{game_id}", response_model=ExchangeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_exchange(
    game_id: int,
    body: ExchangeCreate,
    user_id: UserId = Depends(get_current_user_id),
    engine: ExchangeEngine = Depends(get_exchange_engine),
):
    """Offer the caller's game to another user."""
    offer = await engine.create_offer(user_id, GameId(game_id), body.to_user_email)
    return ExchangeResponse.model_validate(offer)


@router.get("/{game_id}", response_model=ExchangeResponse)
async def get_exchange(
    game_id: int,
    user_id: UserId = Depends(get_current_user_id),
    engine: ExchangeEngine = Depends(get_exchange_engine),
):
    offer = await engine.get_offer(user_id, GameId(game_id))
    return ExchangeResponse.model_validate(offer)


@router.delete("/{game_id}", response_model=ExchangeResponse)
async def cancel_exchange(
    game_id: int,
    user_id: UserId = Depends(get_current_user_id),
    engine: ExchangeEngine = Depends(get_exchange_engine),
):
    """Withdraw the pending offer on the caller's game."""
    offer = await engine.cancel_offer(user_id, GameId(game_id))
    return ExchangeResponse.model_validate(offer)
