"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and GameId wrap ints; never mix them in domain logic
    - Game conditions and notification topics are Enums, no raw string matching
    - OfferState is derived from the presence of an exchange row, never stored

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
GameId = NewType("GameId", int)


# ─── Enums ───────────────────────────────────────────────────────

class GameCondition(str, Enum):
    """Physical condition of a game copy; stored lower-case."""
    MINT = "mint"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class OfferState(str, Enum):
    """Per-game transfer state, derived from the exchanges table."""
    OWNED = "owned"
    OFFER_PENDING = "offer_pending"


class AccessDecision(str, Enum):
    """Ownership Guard verdict for (user, game)."""
    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"
    ITEM_NOT_FOUND = "item_not_found"


class NotificationTopic(str, Enum):
    """Outbound event topics; values are the published topic names."""
    PASSWORD_CHANGED = "user-updated-password"
    OFFER_CREATED = "offer-created"
    OFFER_ACCEPTED = "offer-accepted"
