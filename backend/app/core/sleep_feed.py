"""Social Sleep Feed — pure filter, sort, paginate, aggregate and envelope building.

Invariants:
    - Viewer's own records never pass the filter, even if the store returns them
    - Only complete records (wake_time set, duration_minutes > 0) pass the filter
    - Window is inclusive on both ends: now - days <= bedtime <= now
    - Sorting is always descending; ties broken by bedtime desc, then id asc
    - Statistics are computed over the full filtered set, never over the page
    - Empty input yields zeroed statistics (no None, no NaN)

Design Decisions:
    - Filter/sort/aggregate run over one in-memory list fetched once per request:
      page and statistics always describe the same snapshot
    - Shell (services/sleep_feed_service.py) does the IO; everything here is
      deterministic given (records, viewer_id, followee_ids, now)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Sequence

from app.core.domain_types import SleepRecordView, SortKey, UserId, as_utc
from app.core.feed_params import (
    FeedParams, parse_sort_key, validate_limit, validate_offset,
)
from app.core.pagination import build_feed_pagination
from app.core.sleep_rules import format_duration, round_half_up


NOT_FOLLOWING_MESSAGE = (
    "You're not following anyone yet. Follow users to see their sleep data!"
)


# ─── Filter ──────────────────────────────────────────────────────

def window_start(now: datetime, days: int) -> datetime:
    return as_utc(now) - timedelta(days=days)


def filter_feed_records(
    records: Iterable[SleepRecordView],
    viewer_id: UserId,
    followee_ids: set[UserId],
    days: int,
    now: datetime,
) -> list[SleepRecordView]:
    """Keep followees' complete records whose bedtime falls inside the window."""
    if not followee_ids:
        return []
    since = window_start(now, days)
    until = as_utc(now)
    return [
        r for r in records
        if r.owner_id != viewer_id
        and r.owner_id in followee_ids
        and r.is_complete
        and since <= as_utc(r.bedtime) <= until
    ]


# ─── Sort / Paginate ─────────────────────────────────────────────

def _desc_time(value: datetime | None) -> float:
    # Missing timestamps sort last under a descending order
    return -as_utc(value).timestamp() if value is not None else float("inf")


_PRIMARY_KEYS: dict[SortKey, Callable[[SleepRecordView], float]] = {
    SortKey.DURATION: lambda r: (
        -r.duration_minutes if r.duration_minutes is not None else float("inf")
    ),
    SortKey.BEDTIME: lambda r: _desc_time(r.bedtime),
    SortKey.WAKE_TIME: lambda r: _desc_time(r.wake_time),
    SortKey.CREATED_AT: lambda r: _desc_time(r.created_at),
}


def sort_records(
    records: Iterable[SleepRecordView], sort_key: SortKey,
) -> list[SleepRecordView]:
    primary = _PRIMARY_KEYS[parse_sort_key(sort_key)]
    return sorted(
        records, key=lambda r: (primary(r), _desc_time(r.bedtime), r.id),
    )


def paginate(
    records: Sequence[SleepRecordView],
    sort_key: SortKey,
    limit: int,
    offset: int,
) -> tuple[list[SleepRecordView], int]:
    """Sort the full set, slice [offset, offset + limit). Returns (page, total).

    Raises InvalidParameterError for an unknown sort key, a limit outside
    1-100 or a negative offset.
    """
    sort_key = parse_sort_key(sort_key)
    validate_limit(limit)
    validate_offset(offset)
    ordered = sort_records(records, sort_key)
    return ordered[offset:offset + limit], len(ordered)


# ─── Aggregate ───────────────────────────────────────────────────

@dataclass(frozen=True)
class FeedStatistics:
    total_records: int = 0
    unique_user_count: int = 0
    avg_minutes: int = 0
    min_minutes: int = 0
    max_minutes: int = 0
    total_hours: float = 0.0

    def to_response(self) -> dict:
        return {
            "total_records": self.total_records,
            "unique_users": self.unique_user_count,
            "duration_stats": {
                "average_minutes": self.avg_minutes,
                "longest_minutes": self.max_minutes,
                "shortest_minutes": self.min_minutes,
                "total_sleep_hours": self.total_hours,
            },
        }


def aggregate(records: Sequence[SleepRecordView]) -> FeedStatistics:
    durations = [
        r.duration_minutes for r in records if r.duration_minutes is not None
    ]
    if not records or not durations:
        return FeedStatistics(total_records=len(records))
    total = sum(durations)
    return FeedStatistics(
        total_records=len(records),
        unique_user_count=len({r.owner_id for r in records}),
        avg_minutes=int(round_half_up(total / len(durations))),
        min_minutes=min(durations),
        max_minutes=max(durations),
        total_hours=round_half_up(total / 60, 1),
    )


# ─── Envelope ────────────────────────────────────────────────────

def serialize_record(record: SleepRecordView) -> dict:
    bedtime = as_utc(record.bedtime)
    return {
        "id": record.id,
        "user_id": record.owner_id,
        "user_name": record.owner_name,
        "bedtime": bedtime.isoformat(),
        "wake_time": (
            as_utc(record.wake_time).isoformat() if record.wake_time else None
        ),
        "duration_minutes": record.duration_minutes,
        "formatted_duration": format_duration(record.duration_minutes),
        "sleep_date": bedtime.date().isoformat(),
        "created_at": as_utc(record.created_at).isoformat(),
        "record_complete": record.is_complete,
    }


def empty_feed_message(following_count: int, days: int) -> str:
    if following_count == 0:
        return NOT_FOLLOWING_MESSAGE
    return (
        f"No completed sleep records found from the {following_count} users "
        f"you follow in the last {days} days."
    )


def _context_blocks(
    params: FeedParams, following_count: int, now: datetime,
) -> dict:
    return {
        "date_range": {
            "days_back": params.days,
            "from_date": window_start(now, params.days).date().isoformat(),
            "to_date": as_utc(now).date().isoformat(),
        },
        "sorting": {"sort_by": params.sort_by.value},
        "privacy_info": {
            "data_source": "followed_users_only",
            "record_types": "completed_records_only",
            "your_records_included": False,
            "following_count": following_count,
        },
    }


def build_feed_response(
    params: FeedParams,
    page: Sequence[SleepRecordView],
    total: int,
    statistics: FeedStatistics,
    following_count: int,
    now: datetime,
) -> dict:
    return {
        "sleep_records": [serialize_record(r) for r in page],
        "pagination": build_feed_pagination(
            total, len(page), params.limit, params.offset,
        ),
        "statistics": statistics.to_response(),
        **_context_blocks(params, following_count, now),
    }


def build_empty_feed_response(
    params: FeedParams, following_count: int, now: datetime,
) -> dict:
    response = build_feed_response(
        params, [], 0, FeedStatistics(), following_count, now,
    )
    response["message"] = empty_feed_message(following_count, params.days)
    return response
