"""User Routes: registration, login, profile and password change.

Invariants:
    - POST registers (201 + token), PUT logs in (200 + token)
    - GET/PATCH /user and PUT /user/password act on the caller only
    - Empty PATCH body is a no-op answered with 204
"""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_account_service, get_current_user_id
from app.core.domain_types import UserId
from app.schemas.user import (
    LoginRequest, PasswordUpdate, TokenResponse, UserCreate, UserResponse, UserUpdate,
)
from app.services.account_service import AccountService

router = APIRouter(prefix="/api/v1/user", tags=["user"])


@router.post(
    "", response_model=TokenResponse, status_code=status.HTTP_201_CREATED,
)
async def register_user(
    body: UserCreate, accounts: AccountService = Depends(get_account_service),
):
    """Register a new user and return their session token."""
    token = await accounts.register(
        body.name, body.email, body.password, body.street_address,
    )
    return TokenResponse(token=token)


@router.put("", response_model=TokenResponse)
async def login_user(
    body: LoginRequest, accounts: AccountService = Depends(get_account_service),
):
    """Log in; any previously issued token stops working."""
    token = await accounts.login(body.email, body.password)
    return TokenResponse(token=token)


@router.get("", response_model=UserResponse)
async def get_user(
    user_id: UserId = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    return UserResponse.model_validate(await accounts.get_profile(user_id))


@router.patch("", response_model=UserResponse)
async def patch_user(
    body: UserUpdate,
    user_id: UserId = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    """Update name and/or street address."""
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    user = await accounts.update_details(user_id, fields)
    return UserResponse.model_validate(user)


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    body: PasswordUpdate,
    user_id: UserId = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.change_password(user_id, body.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
