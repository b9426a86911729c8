"""Sleep Session Rules — duration derivation, formatting and clock-out checks.

Tests:
    - Duration is whole minutes, half-up rounded, None while active
    - Bedtime in the future is rejected
    - Wake time must follow bedtime by 1 minute to 24 hours
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import BusinessRuleError
from app.core.sleep_rules import (
    round_half_up, compute_duration_minutes, format_duration,
    validate_bedtime, validate_wake_time,
)

BED = datetime(2026, 10, 10, 22, 0, tzinfo=timezone.utc)


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
    assert round_half_up(7.25, 1) == 7.3


def test_duration_in_whole_minutes():
    assert compute_duration_minutes(BED, BED + timedelta(hours=8)) == 480


def test_duration_rounds_half_minute_up():
    assert compute_duration_minutes(BED, BED + timedelta(seconds=150)) == 3


def test_duration_none_while_active():
    assert compute_duration_minutes(BED, None) is None


def test_duration_accepts_naive_datetimes_as_utc():
    naive_bed = BED.replace(tzinfo=None)
    assert compute_duration_minutes(naive_bed, BED + timedelta(minutes=90)) == 90


def test_format_duration():
    assert format_duration(480) == "8h 0m"
    assert format_duration(455) == "7h 35m"
    assert format_duration(None) is None


def test_future_bedtime_rejected():
    with pytest.raises(BusinessRuleError) as exc_info:
        validate_bedtime(BED + timedelta(minutes=1), now=BED)
    assert exc_info.value.code == "INVALID_SLEEP_TIMES"
    assert exc_info.value.http_status == 422


def test_bedtime_equal_to_now_accepted():
    validate_bedtime(BED, now=BED)


def test_wake_before_bedtime_rejected():
    with pytest.raises(BusinessRuleError) as exc_info:
        validate_wake_time(BED, BED - timedelta(minutes=5))
    assert exc_info.value.details == {"field": "wake_time"}


def test_wake_equal_to_bedtime_rejected():
    with pytest.raises(BusinessRuleError):
        validate_wake_time(BED, BED)


def test_session_longer_than_24_hours_rejected():
    with pytest.raises(BusinessRuleError):
        validate_wake_time(BED, BED + timedelta(hours=24, minutes=1))


def test_session_of_exactly_24_hours_accepted():
    assert validate_wake_time(BED, BED + timedelta(hours=24)) == 1440


def test_session_under_one_minute_rejected():
    with pytest.raises(BusinessRuleError):
        validate_wake_time(BED, BED + timedelta(seconds=20))
