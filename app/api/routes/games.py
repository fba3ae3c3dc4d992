"""Game Routes: list, read, replace, patch and delete games.

Invariants:
    - Every route requires a valid bearer token
    - PUT/PATCH/DELETE are owner-only (Ownership Guard in GameService)
    - DELETE answers with the game as it was before deletion
"""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_current_user_id, get_game_service
from app.core.domain_types import GameId, UserId
from app.schemas.game import GameCreate, GamePatch, GameResponse
from app.services.game_service import GameService

router = APIRouter(prefix="/api/v1/game", tags=["game"])


@router.post(
    "", response_model=GameResponse, status_code=status.HTTP_201_CREATED,
)
async def create_game(
    body: GameCreate,
    user_id: UserId = Depends(get_current_user_id),
    games: GameService = Depends(get_game_service),
):
    """List a game owned by the caller."""
    game = await games.add_game(user_id, body.model_dump(mode="json"))
    return GameResponse.from_model(game)


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(
    game_id: int,
    user_id: UserId = Depends(get_current_user_id),
    games: GameService = Depends(get_game_service),
):
    return GameResponse.from_model(await games.get_game(GameId(game_id)))


@router.put("/{game_id}", response_model=GameResponse)
async def replace_game(
    game_id: int,
    body: GameCreate,
    user_id: UserId = Depends(get_current_user_id),
    games: GameService = Depends(get_game_service),
):
    game = await games.replace_game(
        user_id, GameId(game_id), body.model_dump(mode="json"),
    )
    return GameResponse.from_model(game)


@router.patch("/{game_id}", response_model=GameResponse)
async def patch_game(
    game_id: int,
    body: GamePatch,
    user_id: UserId = Depends(get_current_user_id),
    games: GameService = Depends(get_game_service),
):
    fields = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    game = await games.patch_game(user_id, GameId(game_id), fields)
    if not fields:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return GameResponse.from_model(game)


@router.delete("/{game_id}", response_model=GameResponse)
async def delete_game(
    game_id: int,
    user_id: UserId = Depends(get_current_user_id),
    games: GameService = Depends(get_game_service),
):
    game = await games.delete_game(user_id, GameId(game_id))
    return GameResponse.from_model(game)
