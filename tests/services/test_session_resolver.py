"""Session Resolver: Authorization header to user id.

Tests cover:
    - valid token resolves to its user
    - malformed header and unknown token both raise UnauthenticatedError
    - a replaced token stops resolving
"""

import pytest

from app.core.domain_types import UserId
from app.core.errors import UnauthenticatedError
from app.services.session_resolver import SessionResolver
from app.services.store_credentials import SqlCredentialStore


@pytest.fixture
async def user_id(test_db):
    store = SqlCredentialStore(test_db)
    user = await store.add_user("Alice", "alice@gamemail.com", "x-hash", "1 Main St")
    user_id = UserId(user.id)
    await store.replace_token(user_id, "token-one")
    await test_db.commit()
    return user_id


@pytest.fixture
def resolver(test_db):
    return SessionResolver(SqlCredentialStore(test_db))


async def test_valid_token_resolves(resolver, user_id):
    assert await resolver.resolve("Bearer token-one") == user_id


@pytest.mark.parametrize("header", [None, "", "token-one", "Basic token-one"])
async def test_malformed_header_is_unauthenticated(resolver, user_id, header):
    with pytest.raises(UnauthenticatedError):
        await resolver.resolve(header)


async def test_unknown_token_is_unauthenticated(resolver, user_id):
    with pytest.raises(UnauthenticatedError):
        await resolver.resolve("Bearer not-a-token")


async def test_replaced_token_stops_resolving(resolver, user_id, test_db):
    await SqlCredentialStore(test_db).replace_token(user_id, "token-two")
    await test_db.commit()

    assert await resolver.resolve("Bearer token-two") == user_id
    with pytest.raises(UnauthenticatedError):
        await resolver.resolve("Bearer token-one")
