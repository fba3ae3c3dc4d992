"""Exchange and Receive Routes: the offer/accept protocol end to end.

Tests cover:
    - full lifecycle: offer, read by both parties, accept, ownership moves
    - previous owner loses write access, new owner gains it
    - cancel leaves ownership untouched and allows a new offer
    - status codes for every rejected step (400/401/403/404/409)
    - a self-offer is reported as a bad request before any pending-offer conflict
    - a storage failure answers 500 INTERNAL_ERROR without driver detail
"""

from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.main import app
from app.services.store_games import SqlItemStore
from tests.services.api_helpers import auth, create_game, offer, whoami


async def test_full_exchange_lifecycle(client, alice, bob, recorder):
    game = await create_game(client, alice)
    game_id = game["id"]
    bob_id = await whoami(client, bob)

    res = await offer(client, alice, game_id, "bob@gamemail.com")
    assert res.status_code == 201
    assert res.json() == {
        "game_id": game_id, "to_user_id": bob_id, "to_user_email": "bob@gamemail.com",
    }

    for token in (alice, bob):
        res = await client.get(f"/api/v1/exchange/{game_id}", headers=auth(token))
        assert res.status_code == 200
        assert res.json()["to_user_id"] == bob_id

    res = await client.post(f"/api/v1/receive/{game_id}", headers=auth(bob))
    assert res.status_code == 200
    assert res.json()["owned_by"] == bob_id
    assert res.json()["previous_owners"] == 1

    res = await client.get(f"/api/v1/exchange/{game_id}", headers=auth(bob))
    assert res.status_code == 404
    assert recorder.topics() == ["offer-created", "offer-accepted"]


async def test_ownership_rights_move_with_the_game(client, alice, bob):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")
    await client.post(f"/api/v1/receive/{game['id']}", headers=auth(bob))

    res = await client.patch(
        f"/api/v1/game/{game['id']}", json={"condition": "poor"}, headers=auth(alice),
    )
    assert res.status_code == 403
    res = await client.patch(
        f"/api/v1/game/{game['id']}", json={"condition": "poor"}, headers=auth(bob),
    )
    assert res.status_code == 200

    res = await offer(client, alice, game["id"], "bob@gamemail.com")
    assert res.status_code == 403


async def test_game_can_change_hands_twice(client, alice, bob, carol):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")
    await client.post(f"/api/v1/receive/{game['id']}", headers=auth(bob))
    await offer(client, bob, game["id"], "carol@gamemail.com")

    res = await client.post(f"/api/v1/receive/{game['id']}", headers=auth(carol))
    assert res.status_code == 200
    assert res.json()["owned_by"] == await whoami(client, carol)
    assert res.json()["previous_owners"] == 2


async def test_cancel_keeps_owner_and_allows_new_offer(client, alice, bob, carol):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")

    res = await client.delete(f"/api/v1/exchange/{game['id']}", headers=auth(alice))
    assert res.status_code == 200
    assert res.json()["to_user_email"] == "bob@gamemail.com"

    res = await client.post(f"/api/v1/receive/{game['id']}", headers=auth(bob))
    assert res.status_code == 404

    res = await client.get(f"/api/v1/game/{game['id']}", headers=auth(alice))
    assert res.json()["owned_by"] == await whoami(client, alice)
    assert res.json()["previous_owners"] == 0

    res = await offer(client, alice, game["id"], "carol@gamemail.com")
    assert res.status_code == 201


async def test_duplicate_offer_is_conflict(client, alice, bob, carol):
    game = await create_game(client, alice)
    assert (await offer(client, alice, game["id"], "bob@gamemail.com")).status_code == 201

    res = await offer(client, alice, game["id"], "carol@gamemail.com")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


async def test_offer_to_self_is_bad_request(client, alice):
    game = await create_game(client, alice)
    res = await offer(client, alice, game["id"], "alice@gamemail.com")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REQUEST"


async def test_offer_to_self_is_bad_request_even_with_offer_pending(
    client, alice, bob,
):
    game = await create_game(client, alice)
    assert (await offer(client, alice, game["id"], "bob@gamemail.com")).status_code == 201

    res = await offer(client, alice, game["id"], "alice@gamemail.com")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_REQUEST"


async def test_offer_to_unknown_user_is_not_found(client, alice):
    game = await create_game(client, alice)
    res = await offer(client, alice, game["id"], "ghost@gamemail.com")
    assert res.status_code == 404


async def test_offer_by_non_owner_is_forbidden(client, alice, bob, carol):
    game = await create_game(client, alice)
    res = await offer(client, bob, game["id"], "carol@gamemail.com")
    assert res.status_code == 403


async def test_offer_for_missing_game_is_not_found(client, alice, bob):
    res = await offer(client, alice, 999, "bob@gamemail.com")
    assert res.status_code == 404


async def test_offer_requires_token(client, alice, bob):
    game = await create_game(client, alice)
    res = await client.post(
        f"/api/v1/exchange/{game['id']}", json={"to_user_email": "bob@gamemail.com"},
    )
    assert res.status_code == 401


async def test_offer_rejects_invalid_email(client, alice):
    game = await create_game(client, alice)
    res = await offer(client, alice, game["id"], "not-an-email")
    assert res.status_code == 400


async def test_third_party_cannot_read_or_accept(client, alice, bob, carol):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")

    res = await client.get(f"/api/v1/exchange/{game['id']}", headers=auth(carol))
    assert res.status_code == 403
    res = await client.post(f"/api/v1/receive/{game['id']}", headers=auth(carol))
    assert res.status_code == 403

    res = await client.get(f"/api/v1/game/{game['id']}", headers=auth(carol))
    assert res.json()["owned_by"] == await whoami(client, alice)


async def test_offeree_cannot_cancel(client, alice, bob):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")
    res = await client.delete(f"/api/v1/exchange/{game['id']}", headers=auth(bob))
    assert res.status_code == 403


async def test_cancel_without_offer_is_not_found(client, alice):
    game = await create_game(client, alice)
    res = await client.delete(f"/api/v1/exchange/{game['id']}", headers=auth(alice))
    assert res.status_code == 404


async def test_receive_without_offer_is_not_found(client, alice, bob):
    game = await create_game(client, alice)
    res = await client.post(f"/api/v1/receive/{game['id']}", headers=auth(bob))
    assert res.status_code == 404


async def test_receive_requires_token(client, alice, bob):
    game = await create_game(client, alice)
    await offer(client, alice, game["id"], "bob@gamemail.com")
    res = await client.post(f"/api/v1/receive/{game['id']}")
    assert res.status_code == 401


async def test_storage_failure_is_generic_internal_error(
    client, alice, bob, monkeypatch,
):
    game = await create_game(client, alice)

    async def _broken(self, game_id):
        raise OperationalError(
            "SELECT owned_by FROM games", {}, Exception("disk I/O error"),
        )

    monkeypatch.setattr(SqlItemStore, "get_owner_id", _broken)
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        res = await offer(c, alice, game["id"], "bob@gamemail.com")

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "disk I/O" not in res.text
    assert "owned_by" not in res.text
