"""Async Session Factory: async DB sessions for direct usage outside FastAPI.

Invariants:
    - Same session settings as DatabaseSessionManager (expire_on_commit=False)
    - Meant for scripts and test fixtures that need their own engine

Design Decisions:
    - Returns the engine alongside the factory so callers can dispose it
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)


def create_session_factory(
    database_url: str,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an engine and async session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=False)
    return engine, async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
