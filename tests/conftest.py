"""Root conftest: shared test configuration."""

import os

# Settings are read once (lru_cache); pin test values before any app import
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("NOTIFICATION_WEBHOOK_URL", "")
