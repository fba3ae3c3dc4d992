"""Credential Store: users and session tokens over an explicit AsyncSession.

Invariants:
    - Emails are matched and stored lower-case
    - replace_token overwrites the user's single token row (insert only when none exists)
    - Never commits; the calling service owns the transaction
"""

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.models.session_token import SessionToken
from app.models.user import User


class SqlCredentialStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_id_for_token(self, token: str) -> UserId | None:
        result = await self.db.execute(
            select(SessionToken.user_id).where(SessionToken.token == token),
        )
        user_id = result.scalar_one_or_none()
        return UserId(user_id) if user_id is not None else None

    async def replace_token(self, user_id: UserId, token: str) -> None:
        result = await self.db.execute(
            update(SessionToken)
            .where(SessionToken.user_id == user_id)
            .values(token=token)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self.db.execute(
                insert(SessionToken).values(token=token, user_id=user_id),
            )

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.lower()),
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UserId) -> User | None:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def add_user(
        self, name: str, email: str, password_hash: str, street_address: str,
    ) -> User:
        user = User(
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            street_address=street_address,
        )
        self.db.add(user)
        await self.db.flush()
        return user

    async def update_password(self, user_id: UserId, password_hash: str) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash)
            .execution_options(synchronize_session=False),
        )

    async def update_details(self, user_id: UserId, **fields: object) -> User:
        if fields:
            await self.db.execute(
                update(User)
                .where(User.id == user_id)
                .values(**fields)
                .execution_options(synchronize_session=False),
            )
        return await self.get_user_by_id(user_id)
