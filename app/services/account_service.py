"""Account Service: registration, login, profile and password management.

Invariants:
    - Registration creates the user and their first session token in one transaction
    - Login overwrites the user's token (latest wins); unknown email and wrong
      password are indistinguishable to the caller
    - Password change publishes its notification only after commit

Design Decisions:
    - Hashing runs in a worker thread: bcrypt is CPU-bound and would stall the event loop
"""

import asyncio
import logging
import secrets

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.core.errors import ConflictError, UnauthenticatedError
from app.core.notification_events import password_changed
from app.core.repository_protocols import CredentialStore, NotificationSink, UserLike
from app.infrastructure.database import atomic
from app.infrastructure.notifications import publish_after_commit
from app.infrastructure.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        db: AsyncSession,
        credentials: CredentialStore,
        hasher: PasswordHasher,
        notifier: NotificationSink,
        token_bytes: int = 32,
    ):
        self.db = db
        self.credentials = credentials
        self.hasher = hasher
        self.notifier = notifier
        self.token_bytes = token_bytes

    def _new_token(self) -> str:
        return secrets.token_urlsafe(self.token_bytes)

    async def register(
        self, name: str, email: str, password: str, street_address: str,
    ) -> str:
        """Create a user and return their first session token."""
        if await self.credentials.get_user_by_email(email):
            raise ConflictError("A user with this email already exists")

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        token = self._new_token()
        try:
            async with atomic(self.db):
                user = await self.credentials.add_user(
                    name, email, password_hash, street_address,
                )
                await self.credentials.replace_token(UserId(user.id), token)
                user_id = user.id
        except IntegrityError:
            raise ConflictError("A user with this email already exists")

        logger.info(f"Registered user {user_id}", extra={"user_id": user_id})
        return token

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and issue a fresh token, replacing the old one."""
        user = await self.credentials.get_user_by_email(email)
        if user is None or not await asyncio.to_thread(
            self.hasher.verify, password, user.password_hash,
        ):
            raise UnauthenticatedError("Incorrect email or password")

        token = self._new_token()
        user_id = UserId(user.id)
        async with atomic(self.db):
            await self.credentials.replace_token(user_id, token)
        return token

    async def get_profile(self, user_id: UserId) -> UserLike:
        return await self.credentials.get_user_by_id(user_id)

    async def update_details(self, user_id: UserId, fields: dict) -> UserLike:
        async with atomic(self.db):
            await self.credentials.update_details(user_id, **fields)
        return await self.credentials.get_user_by_id(user_id)

    async def change_password(self, user_id: UserId, password: str) -> None:
        user = await self.credentials.get_user_by_id(user_id)
        email = user.email
        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        async with atomic(self.db):
            await self.credentials.update_password(user_id, password_hash)

        logger.info("Password changed", extra={"user_id": user_id})
        publish_after_commit(self.notifier, password_changed(email))
