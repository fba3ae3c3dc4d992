"""API Helpers: drive the HTTP surface the way a client does.

Invariants:
    - Every helper asserts the expected status so setup failures surface at the
      line that caused them, not in a later assertion
    - GAME_BODY is a valid create payload; overrides replace individual fields
"""


class RecordingNotifier:
    """NotificationSink that keeps every published event in memory."""

    def __init__(self):
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)

    def topics(self) -> list[str]:
        return [e.topic.value for e in self.events]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client, name: str, email: str, password: str = "secret") -> str:
    """Register a user and return their token."""
    res = await client.post("/api/v1/user", json={
        "name": name,
        "email": email,
        "password": password,
        "street_address": "1 Cartridge Lane",
    })
    assert res.status_code == 201, res.text
    return res.json()["token"]


async def whoami(client, token: str) -> int:
    res = await client.get("/api/v1/user", headers=auth(token))
    assert res.status_code == 200, res.text
    return res.json()["id"]


GAME_BODY = {
    "name": "Chrono Trigger",
    "publisher": "Square",
    "year": 1995,
    "platforms": ["SNES"],
    "condition": "good",
}


async def create_game(client, token: str, **overrides) -> dict:
    res = await client.post(
        "/api/v1/game", json={**GAME_BODY, **overrides}, headers=auth(token),
    )
    assert res.status_code == 201, res.text
    return res.json()


async def offer(client, token: str, game_id: int, to_email: str):
    return await client.post(
        f"/api/v1/exchange/{game_id}",
        json={"to_user_email": to_email},
        headers=auth(token),
    )
