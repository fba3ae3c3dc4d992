"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection, each bound
      to one explicitly passed database session (no process-wide handle)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - *Like protocols describe ORM rows structurally so services and tests can
      pass plain objects without importing app.models
    - Store methods never commit; the caller owns the transaction boundary
"""

from typing import Protocol

from app.core.domain_types import GameId, UserId
from app.core.notification_events import NotificationEvent


class UserLike(Protocol):
    """Structural contract for user records."""
    id: int
    name: str
    email: str
    password_hash: str
    street_address: str


class GameLike(Protocol):
    """Structural contract for game records."""
    id: int
    name: str
    publisher: str
    year: int
    condition: str
    previous_owners: int
    owned_by: int
    platform_names: list[str]


class ExchangeLike(Protocol):
    """Structural contract for pending-offer rows."""
    game_id: int
    to_user_id: int


class CredentialStore(Protocol):
    """Users and their session tokens."""
    async def get_user_id_for_token(self, token: str) -> UserId | None: ...
    async def replace_token(self, user_id: UserId, token: str) -> None: ...
    async def get_user_by_email(self, email: str) -> UserLike | None: ...
    async def get_user_by_id(self, user_id: UserId) -> UserLike | None: ...
    async def add_user(
        self, name: str, email: str, password_hash: str, street_address: str,
    ) -> UserLike: ...
    async def update_password(self, user_id: UserId, password_hash: str) -> None: ...
    async def update_details(self, user_id: UserId, **fields: object) -> UserLike: ...


class ItemStore(Protocol):
    """Games, their platform tags and their current owner."""
    async def get(self, game_id: GameId) -> GameLike | None: ...
    async def get_owner_id(self, game_id: GameId) -> UserId | None: ...
    async def lock_owner(self, game_id: GameId) -> UserId | None: ...
    async def add(self, owner_id: UserId, fields: dict) -> GameLike: ...
    async def replace(self, game_id: GameId, fields: dict) -> None: ...
    async def patch(self, game_id: GameId, fields: dict) -> None: ...
    async def transfer_owner(
        self, game_id: GameId, previous_owner: UserId, new_owner: UserId,
    ) -> bool: ...
    async def delete(self, game_id: GameId) -> None: ...


class ExchangeStore(Protocol):
    """Pending offers, at most one per game."""
    async def insert_if_absent(self, game_id: GameId, to_user_id: UserId) -> bool: ...
    async def get(self, game_id: GameId) -> ExchangeLike | None: ...
    async def delete(
        self, game_id: GameId, to_user_id: UserId | None = None,
    ) -> bool: ...


class NotificationSink(Protocol):
    """Fire-and-forget outbound events; must never raise into the caller."""
    def publish(self, event: NotificationEvent) -> None: ...
