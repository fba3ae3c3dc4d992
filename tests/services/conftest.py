"""Service test fixtures: async DB, recording notifier and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - get_notifier overridden with a recorder so tests can assert on published events
    - db_manager patched so the readiness probe sees the test engine
    - world seeds alice, bob and carol plus one game owned by alice;
      file_world seeds the same on a file-backed database shared by two sessions

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Route tests create users and games through the HTTP API (api_helpers.py);
      service tests seed rows through the stores
    - file_world exists because in-memory SQLite shares one connection between
      sessions, so overlapping transactions need a real file
"""

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.base import Base
from app.db.session import create_session_factory
from app.core.domain_types import GameId, UserId
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.notifications import get_notifier
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import app
from app.services.store_credentials import SqlCredentialStore
from app.services.store_games import SqlItemStore
from tests.services.api_helpers import RecordingNotifier, register


@pytest.fixture
async def test_engine():
    engine, _ = create_session_factory("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def recorder():
    return RecordingNotifier()


@pytest.fixture
async def client(test_engine, test_session_factory, recorder):
    """FastAPI test client with DB and notifier dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: recorder

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def alice(client):
    return await register(client, "Alice", "alice@gamemail.com")


@pytest.fixture
async def bob(client):
    return await register(client, "Bob", "bob@gamemail.com")


@pytest.fixture
async def carol(client):
    return await register(client, "Carol", "carol@gamemail.com")


# ─── Seeded worlds (service-level tests) ─────────────────────────

GAME_FIELDS = {
    "name": "Chrono Trigger",
    "publisher": "Square",
    "year": 1995,
    "platforms": ["snes"],
    "condition": "good",
}


async def _seed(db) -> SimpleNamespace:
    users = SqlCredentialStore(db)
    ids = {}
    for name in ("alice", "bob", "carol"):
        user = await users.add_user(
            name.title(), f"{name}@gamemail.com", "hash", "1 Cartridge Lane",
        )
        ids[name] = UserId(user.id)
    game = await SqlItemStore(db).add(ids["alice"], GAME_FIELDS)
    ids["game"] = GameId(game.id)
    await db.commit()
    return SimpleNamespace(**ids)


@pytest.fixture
async def world(test_db):
    return await _seed(test_db)


@pytest.fixture
async def file_world(tmp_path):
    """Seeded world plus two sessions on separate connections to one database."""
    engine, factory = create_session_factory(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}",
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with factory() as first, factory() as second:
        ids = await _seed(first)
        yield SimpleNamespace(first=first, second=second, **vars(ids))
    await engine.dispose()


@pytest.fixture
def transfer_after_check(monkeypatch):
    """Commit an accepted offer right after the guard's unlocked owner check passes.

    The requester's write then runs against a game that changed hands while
    their request was in flight.
    """
    def arm(guard, accepting_engine, new_owner_id, game_id):
        original = guard.require_owner

        async def _check_then_transfer(user_id, checked_game_id):
            await original(user_id, checked_game_id)
            await accepting_engine.accept_offer(new_owner_id, game_id)

        monkeypatch.setattr(guard, "require_owner", _check_then_transfer)

    return arm
