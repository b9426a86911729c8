"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session, still through
      DatabaseSessionManager.session() so store errors map to DatabaseError
    - get_feed_cache overridden: None by default, an in-memory FeedCache
      when a test requests the cached_client fixture
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (FOR UPDATE is a no-op there; the partial unique index still applies)
    - Seed helpers write through the ORM so duration_minutes is derived by the
      same hook production writes use
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.cache import FeedCache, InMemoryCache, get_feed_cache
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models import User, Follow, SleepRecord
import app.infrastructure.database as db_module
from app.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
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


async def _make_client(test_engine, test_session_factory, cache):
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_feed_cache] = lambda: cache

    return AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    )


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden and no cache."""
    original_manager = db_module.db_manager
    async with await _make_client(
        test_engine, test_session_factory, None,
    ) as c:
        yield c
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def feed_cache():
    return FeedCache(InMemoryCache(), prefix="test")


@pytest.fixture
async def cached_client(test_engine, test_session_factory, feed_cache):
    """FastAPI test client whose feed reads go through an in-memory cache."""
    original_manager = db_module.db_manager
    async with await _make_client(
        test_engine, test_session_factory, feed_cache,
    ) as c:
        yield c
    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


class Seeder:
    """Inserts users, follow edges and sleep records through the ORM."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.now = datetime.now(timezone.utc)

    async def user(self, name: str) -> User:
        user = User(name=name)
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def follow(self, follower: User, followee: User) -> Follow:
        edge = Follow(user_id=follower.id, following_user_id=followee.id)
        self.db.add(edge)
        await self.db.commit()
        await self.db.refresh(edge)
        return edge

    async def sleep(
        self, owner: User, hours_ago: float = 24, minutes: int | None = 480,
    ) -> SleepRecord:
        """Completed record `minutes` long, or an active one when minutes is None."""
        bedtime = self.now - timedelta(hours=hours_ago)
        record = SleepRecord(
            user_id=owner.id,
            bedtime=bedtime,
            wake_time=(
                bedtime + timedelta(minutes=minutes) if minutes is not None else None
            ),
        )
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record


@pytest.fixture
def seed(test_db):
    return Seeder(test_db)
