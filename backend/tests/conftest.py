"""Root conftest — shared test configuration."""

import os

# Tests never reach a real database or Redis
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("CACHE_BACKEND", "none")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "true")
