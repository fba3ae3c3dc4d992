"""Request Dependencies: per-request wiring of services around one DB session.

Invariants:
    - Every service in a request shares the AsyncSession yielded by get_db
      (FastAPI caches a dependency per request)
    - Authentication runs before body-independent business checks
    - The notifier comes from get_notifier so tests can swap in a recorder

Design Decisions:
    - Plain functions + Depends over a DI container: explicit and overridable
      through app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import UserId
from app.infrastructure.database import get_db
from app.infrastructure.notifications import NotificationDispatcher, get_notifier
from app.infrastructure.passwords import PasswordHasher
from app.services.account_service import AccountService
from app.services.exchange_engine import ExchangeEngine
from app.services.game_service import GameService
from app.services.ownership_guard import OwnershipGuard
from app.services.session_resolver import SessionResolver
from app.services.store_credentials import SqlCredentialStore
from app.services.store_exchanges import SqlExchangeStore
from app.services.store_games import SqlItemStore


@lru_cache
def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        settings.password_hash_scheme, settings.password_hash_rounds,
    )


async def get_current_user_id(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> UserId:
    """Resolve the bearer token or raise UnauthenticatedError (401)."""
    return await SessionResolver(SqlCredentialStore(db)).resolve(authorization)


def get_account_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(
        db, SqlCredentialStore(db), hasher, notifier,
        token_bytes=get_settings().session_token_bytes,
    )


def get_game_service(db: AsyncSession = Depends(get_db)) -> GameService:
    items = SqlItemStore(db)
    return GameService(db, items, SqlExchangeStore(db), OwnershipGuard(items))


def get_exchange_engine(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> ExchangeEngine:
    return ExchangeEngine.for_session(db, notifier)
