"""Exchange Engine: pending transfer offers and the atomic ownership handoff.

Per-game states (derived from the exchanges table, never stored):

    Owned(owner) --create--> OfferPending(owner, offeree) --accept--> Owned(offeree)
                 <--cancel--

Invariants:
    - Preconditions are checked in a fixed order; each failure is exactly one error kind
    - create_offer: the exchanges primary key decides races; the prior read is advisory
    - accept_offer: exchange delete + conditional owner/counter UPDATE commit as ONE
      transaction, or neither does
    - Every transition locks the game row (lock_owner) before its first write and
      re-checks the owner there, so create, cancel and accept on one game
      serialize and a former owner can never act on a game they just lost
    - Notifications are published only after commit, and emails needed for them are
      read before the transaction so nothing can fail between commit and publish
    - No ORM attribute is touched after a rolled-back write (objects are expired then)

Design Decisions:
    - Storage handle passed explicitly: the engine is built per request around one
      AsyncSession and stores bound to it (ADR: no hidden global connection)
    - No application locks: row-level atomicity of the store is the mutual-exclusion
      boundary for create/cancel/accept on a game
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import GameId, OfferState, UserId
from app.core.enforce_exchange import (
    check_no_pending_offer,
    check_offer_exists,
    derive_offer_state,
    validate_accept,
    validate_offeree,
    validate_read,
)
from app.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from app.core.notification_events import offer_accepted, offer_created
from app.core.repository_protocols import (
    CredentialStore, ExchangeLike, ExchangeStore, GameLike, ItemStore, NotificationSink,
)
from app.infrastructure.database import atomic
from app.infrastructure.notifications import publish_after_commit
from app.services.ownership_guard import OwnershipGuard
from app.services.store_credentials import SqlCredentialStore
from app.services.store_exchanges import SqlExchangeStore
from app.services.store_games import SqlItemStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Offer:
    game_id: int
    to_user_id: int
    to_user_email: str


class ExchangeEngine:
    """Offer lifecycle for one request's database session."""

    def __init__(
        self,
        db: AsyncSession,
        credentials: CredentialStore,
        items: ItemStore,
        exchanges: ExchangeStore,
        guard: OwnershipGuard,
        notifier: NotificationSink,
    ):
        self.db = db
        self.credentials = credentials
        self.items = items
        self.exchanges = exchanges
        self.guard = guard
        self.notifier = notifier

    @classmethod
    def for_session(
        cls, db: AsyncSession, notifier: NotificationSink,
    ) -> "ExchangeEngine":
        items = SqlItemStore(db)
        return cls(
            db,
            credentials=SqlCredentialStore(db),
            items=items,
            exchanges=SqlExchangeStore(db),
            guard=OwnershipGuard(items),
            notifier=notifier,
        )

    async def offer_state(self, game_id: GameId) -> OfferState:
        return derive_offer_state(await self.exchanges.get(game_id))

    async def create_offer(
        self, requester_id: UserId, game_id: GameId, offeree_email: str,
    ) -> Offer:
        """Owner offers their game to the user registered under offeree_email."""
        await self.guard.require_owner(requester_id, game_id)

        offeree = await self.credentials.get_user_by_email(offeree_email)
        if error := validate_offeree(requester_id, offeree, offeree_email, game_id):
            raise error
        if error := check_no_pending_offer(
            await self.exchanges.get(game_id), game_id,
        ):
            raise error

        owner = await self.credentials.get_user_by_id(requester_id)
        offer = Offer(game_id, offeree.id, offeree.email)
        owner_email = owner.email

        async with atomic(self.db):
            await self.guard.require_owner_locked(requester_id, game_id)
            if not await self.exchanges.insert_if_absent(game_id, UserId(offer.to_user_id)):
                raise ConflictError(
                    "An offer already exists for this game",
                    ErrorContext(user_id=requester_id, game_id=game_id),
                )

        logger.info(
            f"Offer created for game {game_id} to user {offer.to_user_id}",
            extra={"user_id": requester_id, "game_id": game_id},
        )
        publish_after_commit(
            self.notifier, offer_created(owner_email, offer.to_user_email),
        )
        return offer

    async def get_offer(self, requester_id: UserId, game_id: GameId) -> Offer:
        """Pending offer, visible to the owner and the offeree only."""
        game = await self.items.get(game_id)
        exchange = await self.exchanges.get(game_id) if game else None
        if error := validate_read(requester_id, game, exchange, game_id):
            raise error
        return await self._describe(exchange)

    async def cancel_offer(self, requester_id: UserId, game_id: GameId) -> Offer:
        """Owner withdraws the pending offer; ownership is untouched."""
        await self.guard.require_owner(requester_id, game_id)

        exchange = await self.exchanges.get(game_id)
        if error := check_offer_exists(exchange, game_id):
            raise error
        offer = await self._describe(exchange)

        async with atomic(self.db):
            await self.guard.require_owner_locked(requester_id, game_id)
            if not await self.exchanges.delete(game_id):
                raise ResourceNotFoundError(
                    "Exchange", str(game_id), ErrorContext(game_id=game_id),
                )

        logger.info(
            f"Offer cancelled for game {game_id}",
            extra={"user_id": requester_id, "game_id": game_id},
        )
        return offer

    async def accept_offer(self, requester_id: UserId, game_id: GameId) -> GameLike:
        """Offeree receives the game: owner := offeree, previous_owners += 1, offer removed."""
        game = await self.items.get(game_id)
        exchange = await self.exchanges.get(game_id) if game else None
        if error := validate_accept(requester_id, game, exchange, game_id):
            raise error

        previous_owner = UserId(game.owned_by)
        offeror = await self.credentials.get_user_by_id(previous_owner)
        offeree = await self.credentials.get_user_by_id(requester_id)
        offeror_email, offeree_email = offeror.email, offeree.email
        context = ErrorContext(user_id=requester_id, game_id=game_id)

        async with atomic(self.db):
            owner_id = await self.items.lock_owner(game_id)
            if owner_id is None:
                raise ResourceNotFoundError("Game", str(game_id), context)
            if owner_id != previous_owner:
                raise ConflictError(
                    "Game ownership changed while accepting the offer", context,
                )
            if not await self.exchanges.delete(game_id, to_user_id=requester_id):
                raise ResourceNotFoundError("Exchange", str(game_id), context)
            if not await self.items.transfer_owner(
                game_id, previous_owner, requester_id,
            ):
                raise ConflictError(
                    "Game ownership changed while accepting the offer", context,
                )

        logger.info(
            f"Game {game_id} transferred from user {previous_owner} to {requester_id}",
            extra={"user_id": requester_id, "game_id": game_id},
        )
        publish_after_commit(
            self.notifier, offer_accepted(offeror_email, offeree_email),
        )
        return await self.items.get(game_id)

    async def _describe(self, exchange: ExchangeLike) -> Offer:
        offeree = await self.credentials.get_user_by_id(UserId(exchange.to_user_id))
        return Offer(exchange.game_id, exchange.to_user_id, offeree.email)
