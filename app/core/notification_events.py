"""Notification Events: immutable post-commit event payloads.

Invariants:
    - Events carry only the topic and the relevant email address(es)
    - Builders are PURE; publishing happens in the shell after commit
"""

from dataclasses import dataclass

from app.core.domain_types import NotificationTopic


@dataclass(frozen=True)
class NotificationEvent:
    topic: NotificationTopic
    emails: tuple[str, ...]

    def to_payload(self) -> dict:
        return {"topic": self.topic.value, "emails": list(self.emails)}


def password_changed(email: str) -> NotificationEvent:
    return NotificationEvent(NotificationTopic.PASSWORD_CHANGED, (email,))


def offer_created(offeror_email: str, offeree_email: str) -> NotificationEvent:
    return NotificationEvent(
        NotificationTopic.OFFER_CREATED, (offeror_email, offeree_email),
    )


def offer_accepted(offeror_email: str, offeree_email: str) -> NotificationEvent:
    return NotificationEvent(
        NotificationTopic.OFFER_ACCEPTED, (offeror_email, offeree_email),
    )
