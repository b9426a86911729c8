"""Feed Parameter Validation — turns raw query values into a validated FeedParams.

Invariants:
    - Checked in order days → sort_by → limit → offset; the first failure wins
    - Unknown sort_by is rejected, never silently replaced by the default
    - A non-integer days/limit/offset gets the same code and allowed range as an
      out-of-range one
    - Pure: no IO, raises InvalidParameterError only

Design Decisions:
    - Range checks live here instead of FastAPI Query(ge=, le=): the error must name
      the field with its allowed range and carry a field-specific code, which the
      generic RequestValidationError envelope does not
"""

from dataclasses import dataclass
from typing import Callable

from app.core.domain_types import (
    SortKey,
    MIN_WINDOW_DAYS, MAX_WINDOW_DAYS, MIN_PAGE_LIMIT, MAX_PAGE_LIMIT,
)
from app.core.errors import InvalidParameterError


@dataclass(frozen=True)
class FeedParams:
    """Validated feed query parameters."""
    days: int
    sort_by: SortKey
    limit: int
    offset: int


def _window_error() -> InvalidParameterError:
    return InvalidParameterError(
        "days",
        f"Date range must be between {MIN_WINDOW_DAYS} and {MAX_WINDOW_DAYS} days",
        "INVALID_DATE_RANGE",
        allowed_range=f"{MIN_WINDOW_DAYS}-{MAX_WINDOW_DAYS}",
    )


def _limit_error() -> InvalidParameterError:
    return InvalidParameterError(
        "limit",
        f"Limit must be between {MIN_PAGE_LIMIT} and {MAX_PAGE_LIMIT}",
        "INVALID_PAGINATION_LIMIT",
        allowed_range=f"{MIN_PAGE_LIMIT}-{MAX_PAGE_LIMIT}",
    )


def _offset_error() -> InvalidParameterError:
    return InvalidParameterError(
        "offset",
        "Offset must be non-negative",
        "INVALID_PAGINATION_OFFSET",
        allowed_range=">= 0",
    )


_INTEGER_PARAMETER_ERRORS: dict[str, Callable[[], InvalidParameterError]] = {
    "days": _window_error,
    "limit": _limit_error,
    "offset": _offset_error,
}


def validate_window_days(days: int) -> int:
    if not MIN_WINDOW_DAYS <= days <= MAX_WINDOW_DAYS:
        raise _window_error()
    return days


def parse_sort_key(sort_by: str) -> SortKey:
    try:
        return SortKey(sort_by)
    except ValueError:
        raise InvalidParameterError(
            "sort_by",
            f"Invalid sort parameter '{sort_by}'",
            "INVALID_SORT_PARAMETER",
            allowed_values=SortKey.allowed_values(),
        ) from None


def validate_limit(limit: int) -> int:
    if not MIN_PAGE_LIMIT <= limit <= MAX_PAGE_LIMIT:
        raise _limit_error()
    return limit


def validate_offset(offset: int) -> int:
    if offset < 0:
        raise _offset_error()
    return offset


def integer_parameter_error(field: str) -> InvalidParameterError | None:
    """Range error for a days/limit/offset value that is not an integer at all."""
    factory = _INTEGER_PARAMETER_ERRORS.get(field)
    return factory() if factory else None


def validate_feed_params(
    days: int, sort_by: str, limit: int, offset: int,
) -> FeedParams:
    """Validate all feed parameters. Raises on the first offending field."""
    return FeedParams(
        days=validate_window_days(days),
        sort_by=parse_sort_key(sort_by),
        limit=validate_limit(limit),
        offset=validate_offset(offset),
    )
