"""Sleep Session Rules — pure validation and derivation for clock-in / clock-out.

Invariants:
    - duration_minutes is derived from (bedtime, wake_time) only; None when wake_time is None
    - A completed session lasts between MIN_SLEEP_MINUTES and MAX_SLEEP_HOURS
    - Functions raise BusinessRuleError, never mutate their inputs

Design Decisions:
    - Half-up rounding via Decimal: 2.5 minutes becomes 3, not the even neighbour
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from app.core.domain_types import (
    as_utc, MIN_SLEEP_MINUTES, MAX_SLEEP_HOURS,
)
from app.core.errors import BusinessRuleError


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_duration_minutes(
    bedtime: datetime | None, wake_time: datetime | None,
) -> int | None:
    """Whole minutes between bedtime and wake_time, or None for an active session."""
    if bedtime is None or wake_time is None:
        return None
    seconds = (as_utc(wake_time) - as_utc(bedtime)).total_seconds()
    return int(round_half_up(seconds / 60))


def format_duration(minutes: int | None) -> str | None:
    """480 -> '8h 0m'."""
    if minutes is None:
        return None
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"


def validate_bedtime(bedtime: datetime, now: datetime) -> None:
    if as_utc(bedtime) > as_utc(now):
        raise BusinessRuleError(
            "Bedtime cannot be in the future",
            "INVALID_SLEEP_TIMES", {"field": "bedtime"},
        )


def validate_wake_time(bedtime: datetime, wake_time: datetime) -> int:
    """Check a clock-out time against its bedtime. Returns the derived duration."""
    if as_utc(wake_time) <= as_utc(bedtime):
        raise BusinessRuleError(
            "Wake time must be after bedtime",
            "INVALID_SLEEP_TIMES", {"field": "wake_time"},
        )
    minutes = compute_duration_minutes(bedtime, wake_time)
    if minutes > MAX_SLEEP_HOURS * 60:
        raise BusinessRuleError(
            f"Sleep duration cannot exceed {MAX_SLEEP_HOURS} hours",
            "INVALID_SLEEP_TIMES", {"field": "wake_time"},
        )
    if minutes < MIN_SLEEP_MINUTES:
        raise BusinessRuleError(
            f"Sleep duration must be at least {MIN_SLEEP_MINUTES} minute",
            "INVALID_SLEEP_TIMES", {"field": "wake_time"},
        )
    return minutes

