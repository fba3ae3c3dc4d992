"""Session Resolver: maps an Authorization header to a user id.

Invariants:
    - Malformed header and unknown token raise the same UnauthenticatedError
    - Pure lookup: no writes, no expiry logic
"""

import logging

from app.core.domain_types import UserId
from app.core.enforce_session import extract_bearer_token
from app.core.errors import UnauthenticatedError
from app.core.repository_protocols import CredentialStore

logger = logging.getLogger(__name__)


class SessionResolver:
    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials

    async def resolve(self, authorization: str | None) -> UserId:
        """Return the user id behind a 'Bearer <token>' header."""
        token = extract_bearer_token(authorization)
        if token is None:
            raise UnauthenticatedError()
        user_id = await self.credentials.get_user_id_for_token(token)
        if user_id is None:
            logger.debug("Bearer token did not match any session")
            raise UnauthenticatedError()
        return user_id
