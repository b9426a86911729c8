"""Domain Types — verifies identity types, enums and the record value object.

Tests:
    - NewType wrappers exist and are callable
    - SortKey is the closed set of wire names
    - SleepRecordView completeness requires wake_time and a positive duration
    - as_utc attaches UTC to naive values and converts aware ones
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.domain_types import (
    UserId, SleepRecordId, FollowId, SortKey, SleepStatus,
    SleepRecordView, as_utc,
)

BED = datetime(2026, 10, 10, 22, 0, tzinfo=timezone.utc)


def _view(wake_time, duration):
    return SleepRecordView(
        id=SleepRecordId(1), owner_id=UserId(2), owner_name="Ana",
        bedtime=BED, wake_time=wake_time, duration_minutes=duration,
        created_at=BED,
    )


def test_identity_types_wrap_int():
    assert UserId(3) == 3
    assert SleepRecordId(4) == 4
    assert FollowId(5) == 5


def test_sort_key_wire_names():
    assert SortKey.allowed_values() == [
        "duration", "bedtime", "wake_time", "created_at",
    ]
    assert SortKey("wake_time") is SortKey.WAKE_TIME


def test_sleep_status_values():
    assert {s.value for s in SleepStatus} == {"active", "completed"}


def test_complete_record():
    assert _view(BED + timedelta(hours=8), 480).is_complete


@pytest.mark.parametrize("wake_time,duration", [
    (None, None),
    (BED + timedelta(hours=8), None),
    (BED + timedelta(hours=8), 0),
])
def test_incomplete_records(wake_time, duration):
    assert not _view(wake_time, duration).is_complete


def test_view_is_frozen():
    view = _view(None, None)
    with pytest.raises(AttributeError):
        view.owner_id = UserId(9)


def test_as_utc_attaches_utc_to_naive():
    assert as_utc(datetime(2026, 1, 1, 12, 0)).tzinfo is timezone.utc


def test_as_utc_converts_aware():
    plus_two = timezone(timedelta(hours=2))
    converted = as_utc(datetime(2026, 1, 1, 12, 0, tzinfo=plus_two))
    assert converted.hour == 10
    assert converted.utcoffset() == timedelta(0)
