"""Feed Parameter Validation — bounds, sort keys and check order.

Tests:
    - Boundary values 1/30 days and 1/100 limit are accepted
    - Each out-of-range value raises with its field, code and allowed range
    - Unknown sort_by is rejected with the allowed values, never defaulted
    - days is checked before sort_by, limit and offset
"""

import pytest

from app.core.domain_types import SortKey
from app.core.errors import InvalidParameterError
from app.core.feed_params import (
    validate_feed_params, validate_window_days, parse_sort_key,
    validate_limit, validate_offset, integer_parameter_error,
)


def test_valid_params_build_feed_params():
    params = validate_feed_params(7, "bedtime", 20, 0)
    assert params.days == 7
    assert params.sort_by is SortKey.BEDTIME
    assert params.limit == 20
    assert params.offset == 0


@pytest.mark.parametrize("days", [1, 30])
def test_window_bounds_are_inclusive(days):
    assert validate_window_days(days) == days


@pytest.mark.parametrize("days", [0, 31, 50, -1])
def test_window_out_of_range_names_field_and_range(days):
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_window_days(days)
    err = exc_info.value
    assert err.code == "INVALID_DATE_RANGE"
    assert err.http_status == 400
    assert err.details == {"field": "days", "allowed_range": "1-30"}


def test_unknown_sort_key_lists_allowed_values():
    with pytest.raises(InvalidParameterError) as exc_info:
        parse_sort_key("name")
    err = exc_info.value
    assert err.code == "INVALID_SORT_PARAMETER"
    assert err.details["field"] == "sort_by"
    assert err.details["allowed_values"] == [
        "duration", "bedtime", "wake_time", "created_at",
    ]


def test_sort_key_is_case_sensitive():
    with pytest.raises(InvalidParameterError):
        parse_sort_key("DURATION")


@pytest.mark.parametrize("limit", [0, 101])
def test_limit_out_of_range(limit):
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_limit(limit)
    assert exc_info.value.code == "INVALID_PAGINATION_LIMIT"
    assert exc_info.value.details["allowed_range"] == "1-100"


@pytest.mark.parametrize("limit", [1, 100])
def test_limit_bounds_are_inclusive(limit):
    assert validate_limit(limit) == limit


def test_negative_offset_rejected():
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_offset(-1)
    assert exc_info.value.code == "INVALID_PAGINATION_OFFSET"
    assert exc_info.value.details["field"] == "offset"


def test_days_checked_before_other_fields():
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_feed_params(0, "bogus", 0, -1)
    assert exc_info.value.field == "days"


def test_sort_checked_before_limit():
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_feed_params(7, "bogus", 0, -1)
    assert exc_info.value.field == "sort_by"


def test_limit_checked_before_offset():
    with pytest.raises(InvalidParameterError) as exc_info:
        validate_feed_params(7, "duration", 0, -1)
    assert exc_info.value.field == "limit"


def test_integer_parameter_error_matches_range_error():
    err = integer_parameter_error("limit")
    assert err.code == "INVALID_PAGINATION_LIMIT"
    assert err.details == {"field": "limit", "allowed_range": "1-100"}


def test_integer_parameter_error_ignores_other_fields():
    assert integer_parameter_error("sort_by") is None
