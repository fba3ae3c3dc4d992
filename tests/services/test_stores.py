"""SQL Stores: the storage guarantees the services build on.

Tests cover:
    - credential store lower-cases emails and keeps one token per user
    - item store platform sync, conditional transfer and delete cascade
    - lock_owner reads the owner with a row lock (FOR UPDATE on PostgreSQL)
    - exchange store insert_if_absent and conditional delete
"""

import pytest
from sqlalchemy.dialects import postgresql

from app.core.domain_types import GameId, UserId
from app.services.store_credentials import SqlCredentialStore
from app.services.store_exchanges import SqlExchangeStore
from app.services.store_games import SqlItemStore

FIELDS = {
    "name": "Earthbound",
    "publisher": "Nintendo",
    "year": 1994,
    "platforms": ["snes", "wii u"],
    "condition": "mint",
}


@pytest.fixture
async def ids(test_db):
    users = SqlCredentialStore(test_db)
    alice = await users.add_user("Alice", "Alice@GameMail.com", "h", "1 Main St")
    bob = await users.add_user("Bob", "bob@gamemail.com", "h", "2 Main St")
    game = await SqlItemStore(test_db).add(UserId(alice.id), FIELDS)
    result = UserId(alice.id), UserId(bob.id), GameId(game.id)
    await test_db.commit()
    return result


# ─── Credentials ─────────────────────────────────────────────────

async def test_email_stored_and_matched_lower_case(test_db, ids):
    users = SqlCredentialStore(test_db)
    user = await users.get_user_by_email("ALICE@gamemail.com")
    assert user is not None
    assert user.email == "alice@gamemail.com"


async def test_replace_token_keeps_single_row(test_db, ids):
    alice, _, _ = ids
    users = SqlCredentialStore(test_db)
    await users.replace_token(alice, "first")
    await users.replace_token(alice, "second")
    await test_db.commit()

    assert await users.get_user_id_for_token("second") == alice
    assert await users.get_user_id_for_token("first") is None


async def test_update_details_returns_fresh_user(test_db, ids):
    alice, _, _ = ids
    user = await SqlCredentialStore(test_db).update_details(alice, name="Alicia")
    assert user.name == "Alicia"


# ─── Items ───────────────────────────────────────────────────────

async def test_add_defaults_previous_owners(test_db, ids):
    _, _, game_id = ids
    game = await SqlItemStore(test_db).get(game_id)
    assert game.previous_owners == 0
    assert game.platform_names == ["snes", "wii u"]


async def test_patch_replaces_platform_set(test_db, ids):
    _, _, game_id = ids
    items = SqlItemStore(test_db)
    await items.patch(game_id, {"platforms": ["wii u", "switch", "switch"]})
    await test_db.commit()

    game = await items.get(game_id)
    assert game.platform_names == ["switch", "wii u"]
    assert game.name == "Earthbound"


async def test_transfer_owner_increments_counter(test_db, ids):
    alice, bob, game_id = ids
    items = SqlItemStore(test_db)
    assert await items.transfer_owner(game_id, alice, bob)
    await test_db.commit()

    game = await items.get(game_id)
    assert game.owned_by == bob
    assert game.previous_owners == 1


async def test_transfer_owner_is_noop_for_wrong_previous_owner(test_db, ids):
    alice, bob, game_id = ids
    items = SqlItemStore(test_db)
    assert not await items.transfer_owner(game_id, bob, alice)

    game = await items.get(game_id)
    assert game.owned_by == alice
    assert game.previous_owners == 0


async def test_delete_removes_game(test_db, ids):
    _, _, game_id = ids
    items = SqlItemStore(test_db)
    await items.delete(game_id)
    await test_db.commit()
    assert await items.get(game_id) is None
    assert await items.get_owner_id(game_id) is None


async def test_lock_owner_reads_owner_or_none(test_db, ids):
    alice, _, game_id = ids
    items = SqlItemStore(test_db)
    assert await items.lock_owner(game_id) == alice
    assert await items.lock_owner(GameId(404)) is None


async def test_lock_owner_selects_for_update(test_db, ids, monkeypatch):
    _, _, game_id = ids
    items = SqlItemStore(test_db)
    statements = []
    execute = test_db.execute

    async def _recording_execute(statement, *args, **kwargs):
        statements.append(statement)
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(test_db, "execute", _recording_execute)
    await items.lock_owner(game_id)

    sql = str(statements[0].compile(dialect=postgresql.dialect()))
    assert sql.rstrip().endswith("FOR UPDATE")


# ─── Exchanges ───────────────────────────────────────────────────

async def test_insert_if_absent_rejects_second_row(test_db, ids):
    _, bob, game_id = ids
    exchanges = SqlExchangeStore(test_db)
    assert await exchanges.insert_if_absent(game_id, bob)
    await test_db.commit()

    assert not await exchanges.insert_if_absent(game_id, bob)
    exchange = await exchanges.get(game_id)
    assert exchange.to_user_id == bob


async def test_conditional_delete_requires_matching_offeree(test_db, ids):
    alice, bob, game_id = ids
    exchanges = SqlExchangeStore(test_db)
    await exchanges.insert_if_absent(game_id, bob)
    await test_db.commit()

    assert not await exchanges.delete(game_id, to_user_id=alice)
    assert await exchanges.delete(game_id, to_user_id=bob)
    assert not await exchanges.delete(game_id)
