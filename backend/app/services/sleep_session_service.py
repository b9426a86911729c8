"""Sleep Session Service — clock-in and clock-out, the only writes to sleep_records.

Invariants:
    - Writes for one owner are serialized: the owner's users row is locked
      (SELECT ... FOR UPDATE) before the overlap check and insert
    - Clock-out re-reads the record FOR UPDATE after the owner lock, so a record
      is completed at most once
    - A new (open-ended) session conflicts with any session that is still active
      or that ends after the new bedtime
    - The partial unique index backs the "one active session" rule when the lock
      is unavailable (SQLite); its IntegrityError maps to ACTIVE_SESSION_EXISTS
    - Clock-out only on the caller's own active record; other owners' records are 404
    - Every successful write invalidates the owner's cached record list

Design Decisions:
    - Rule checks delegated to core/sleep_rules.py; this module only does IO ordering
    - duration_minutes is never set here: the ORM before_update hook derives it
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import Select, select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId, as_utc
from app.core.errors import BusinessRuleError, ResourceNotFoundError
from app.core.sleep_rules import validate_bedtime, validate_wake_time
from app.infrastructure.cache import FeedCache
from app.models.sleep_record import SleepRecord
from app.models.user import User

logger = logging.getLogger(__name__)


class SleepSessionService:
    """Clock-in / clock-out handlers."""

    def __init__(self, db: AsyncSession, cache: FeedCache | None = None):
        self.db = db
        self.cache = cache

    async def clock_in(
        self, user: User, bedtime: datetime | None = None,
        now: datetime | None = None,
    ) -> SleepRecord:
        """Start a new active session for `user`."""
        now = as_utc(now) if now else datetime.now(timezone.utc)
        bedtime = as_utc(bedtime) if bedtime else now
        validate_bedtime(bedtime, now)

        await self._lock_owner(user.id)
        conflict = await self._find_conflict(user.id, bedtime)
        if conflict is not None:
            raise self._conflict_error(conflict)

        record = SleepRecord(user_id=user.id, bedtime=bedtime)
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise BusinessRuleError(
                "You already have an active sleep session",
                "ACTIVE_SESSION_EXISTS",
            )
        await self.db.refresh(record)
        await self._invalidate(user.id)
        logger.info(
            f"Clock-in: sleep record {record.id} started",
            extra={"user_id": user.id},
        )
        return record

    async def clock_out(
        self, user: User, record_id: int, wake_time: datetime | None = None,
        now: datetime | None = None,
    ) -> SleepRecord:
        """Complete the caller's active session `record_id`."""
        now = as_utc(now) if now else datetime.now(timezone.utc)
        await self._lock_owner(user.id)
        record = (
            await self.db.execute(self.record_for_update(record_id))
        ).scalar_one_or_none()
        if record is None or record.user_id != user.id:
            raise ResourceNotFoundError(
                "Sleep record", record_id, "SLEEP_RECORD_NOT_FOUND",
            )
        if not record.is_active:
            raise BusinessRuleError(
                "No active sleep session found", "NO_ACTIVE_SESSION",
                {"sleep_record_id": record.id},
            )

        wake_time = as_utc(wake_time) if wake_time else now
        validate_wake_time(record.bedtime, wake_time)
        record.wake_time = wake_time
        await self.db.commit()
        await self.db.refresh(record)
        await self._invalidate(user.id)
        logger.info(
            f"Clock-out: sleep record {record.id} completed "
            f"({record.duration_minutes} min)",
            extra={"user_id": user.id},
        )
        return record

    async def _lock_owner(self, user_id: UserId) -> None:
        await self.db.execute(
            select(User.id).where(User.id == user_id).with_for_update(),
        )

    @staticmethod
    def record_for_update(record_id: int) -> Select:
        """Re-read the record under a row lock so the is_active check holds until commit."""
        return (
            select(SleepRecord)
            .where(SleepRecord.id == record_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    async def _find_conflict(
        self, user_id: UserId, bedtime: datetime,
    ) -> SleepRecord | None:
        result = await self.db.execute(
            select(SleepRecord)
            .where(SleepRecord.user_id == user_id)
            .where(or_(
                SleepRecord.wake_time.is_(None),
                SleepRecord.wake_time > bedtime,
            ))
            .order_by(SleepRecord.wake_time.is_not(None), SleepRecord.bedtime.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    def _conflict_error(self, conflict: SleepRecord) -> BusinessRuleError:
        if conflict.is_active:
            return BusinessRuleError(
                "You already have an active sleep session",
                "ACTIVE_SESSION_EXISTS", {"active_session_id": conflict.id},
            )
        return BusinessRuleError(
            "Bedtime overlaps with an existing sleep session",
            "OVERLAPPING_SESSION", {"sleep_record_id": conflict.id},
        )

    async def _invalidate(self, user_id: UserId) -> None:
        if self.cache:
            await self.cache.invalidate_records(user_id)
