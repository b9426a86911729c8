"""SQL Repositories — SQLAlchemy implementations of the core boundary Protocols.

Invariants:
    - followees() is one SELECT over follows; query_records() is one SELECT joined to users
    - query_records() pre-filters in SQL (owners, since, completeness) but the core filter
      re-applies every rule, so a looser store never leaks records
    - Rows leave this module as SleepRecordView, never as ORM objects

Design Decisions:
    - Explicit join for owner names instead of relationship loading: one round trip
      regardless of how many followees the viewer has
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    UserId, SleepRecordId, SleepRecordView, as_utc,
)
from app.models.follow import Follow
from app.models.sleep_record import SleepRecord
from app.models.user import User


class SqlUserRepository:
    """UserRepository over the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> User | None:
        return await self.db.get(User, user_id)


class SqlFollowRepository:
    """FollowRepository over the follows table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def followees(self, user_id: UserId) -> set[UserId]:
        result = await self.db.execute(
            select(Follow.following_user_id).where(Follow.user_id == user_id),
        )
        return {UserId(row) for row in result.scalars().all()}


class SqlSleepRecordRepository:
    """SleepRecordRepository over sleep_records joined with users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def query_records(
        self, owner_ids: set[UserId], since: datetime,
    ) -> list[SleepRecordView]:
        if not owner_ids:
            return []
        result = await self.db.execute(
            select(SleepRecord, User.name)
            .join(User, User.id == SleepRecord.user_id)
            .where(SleepRecord.user_id.in_(owner_ids))
            .where(SleepRecord.bedtime >= as_utc(since))
            .where(SleepRecord.wake_time.is_not(None))
            .where(SleepRecord.duration_minutes > 0)
        )
        return [to_view(record, name) for record, name in result.all()]


def to_view(record: SleepRecord, owner_name: str) -> SleepRecordView:
    return SleepRecordView(
        id=SleepRecordId(record.id),
        owner_id=UserId(record.user_id),
        owner_name=owner_name,
        bedtime=as_utc(record.bedtime),
        wake_time=as_utc(record.wake_time) if record.wake_time else None,
        duration_minutes=record.duration_minutes,
        created_at=as_utc(record.created_at),
    )
