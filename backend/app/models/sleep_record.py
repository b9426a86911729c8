"""SleepRecord ORM — one sleep session, active until clocked out.

Invariants:
    - bedtime non-nullable; wake_time NULL while the session is active
    - duration_minutes recomputed from (bedtime, wake_time) before every insert/update,
      cleared when wake_time is cleared
    - At most one active record per user (partial unique index on user_id WHERE wake_time IS NULL)

Design Decisions:
    - duration_minutes stored (not computed in SQL): the feed sorts and aggregates on it
    - Composite (user_id, bedtime) index serves the feed's owner_ids + since query
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, Index, event, text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import SleepStatus
from app.core.sleep_rules import compute_duration_minutes
from app.db.base import Base


class SleepRecord(Base):
    """A clock-in / clock-out sleep session."""
    __tablename__ = "sleep_records"
    __table_args__ = (
        Index("ix_sleep_records_user_bedtime", "user_id", "bedtime"),
        Index(
            "uq_sleep_records_one_active_per_user", "user_id",
            unique=True,
            postgresql_where=text("wake_time IS NULL"),
            sqlite_where=text("wake_time IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    bedtime: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    wake_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    duration_minutes: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_active(self) -> bool:
        return self.wake_time is None

    @property
    def status(self) -> SleepStatus:
        return SleepStatus.ACTIVE if self.is_active else SleepStatus.COMPLETED


@event.listens_for(SleepRecord, "before_insert")
@event.listens_for(SleepRecord, "before_update")
def _derive_duration(mapper, connection, target: SleepRecord) -> None:
    target.duration_minutes = compute_duration_minutes(
        target.bedtime, target.wake_time,
    )
