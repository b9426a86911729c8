"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, SleepRecordId, FollowId wrap ints — never use bare int ids in domain logic
    - SortKey is a closed set; values are the wire names accepted by the feed endpoint
    - Feed bounds (window days, page limit) defined once here and reused by validation

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - SleepRecordView is a frozen dataclass, not the ORM row: the feed core never
      touches a session, so lazy loads cannot happen inside pure code
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
SleepRecordId = NewType("SleepRecordId", int)
FollowId = NewType("FollowId", int)


# ─── Bounds ──────────────────────────────────────────────────────

MIN_WINDOW_DAYS: int = 1
MAX_WINDOW_DAYS: int = 30
MIN_PAGE_LIMIT: int = 1
MAX_PAGE_LIMIT: int = 100

MIN_SLEEP_MINUTES: int = 1
MAX_SLEEP_HOURS: int = 24


# ─── Enums ───────────────────────────────────────────────────────

class SortKey(str, Enum):
    """Feed ordering keys. Every key sorts descending."""
    DURATION = "duration"
    BEDTIME = "bedtime"
    WAKE_TIME = "wake_time"
    CREATED_AT = "created_at"

    @classmethod
    def allowed_values(cls) -> list[str]:
        return [key.value for key in cls]


class SleepStatus(str, Enum):
    """Sleep record lifecycle: clock-in creates ACTIVE, clock-out makes it COMPLETED."""
    ACTIVE = "active"
    COMPLETED = "completed"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class SleepRecordView:
    """Read-only sleep record as seen by the feed, with its owner's display name."""
    id: SleepRecordId
    owner_id: UserId
    owner_name: str
    bedtime: datetime
    wake_time: datetime | None
    duration_minutes: int | None
    created_at: datetime

    @property
    def is_complete(self) -> bool:
        return (
            self.wake_time is not None
            and self.duration_minutes is not None
            and self.duration_minutes > 0
        )


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
