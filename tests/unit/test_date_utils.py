"""Unit tests for month-key and calendar helpers"""

from datetime import date

import pytest

from household_timeline.domain.exceptions import InvalidMonthKeyError
from household_timeline.utils.date_utils import (
    add_months,
    clamp_day,
    is_month_in_range,
    month_bounds,
    month_range_inclusive,
    parse_iso_date,
    parse_month_key,
)


def test_parse_month_key():
    assert parse_month_key("2026-03") == (2026, 3)


@pytest.mark.parametrize("bad_key", ["2026-3", "2026-13", "2026-00", "26-03", "2026/03", "", None])
def test_parse_month_key_rejects_malformed(bad_key):
    """Test anything but zero-padded YYYY-MM raises"""
    with pytest.raises(InvalidMonthKeyError):
        parse_month_key(bad_key)


def test_invalid_month_key_is_a_value_error():
    with pytest.raises(ValueError):
        parse_month_key("March")


def test_add_months_crosses_year_boundaries():
    assert add_months("2026-11", 3) == "2027-02"
    assert add_months("2026-01", -1) == "2025-12"
    assert add_months("2026-06", 0) == "2026-06"


def test_month_range_inclusive():
    assert month_range_inclusive("2026-11", "2027-01") == ["2026-11", "2026-12", "2027-01"]
    assert month_range_inclusive("2026-05", "2026-05") == ["2026-05"]


def test_month_range_empty_when_start_after_end():
    assert month_range_inclusive("2026-05", "2026-04") == []


def test_is_month_in_range():
    """Test inclusive bounds and open-ended ranges"""
    assert is_month_in_range("2026-03", "2026-03", "2026-03")
    assert is_month_in_range("2027-09", "2026-04")
    assert not is_month_in_range("2026-02", "2026-03")
    assert not is_month_in_range("2026-04", "2026-03", "2026-03")


def test_clamp_day_to_month_end():
    """Test day 31 lands on the last day of short months"""
    assert clamp_day(2026, 2, 31) == 28
    assert clamp_day(2024, 2, 31) == 29
    assert clamp_day(2026, 4, 31) == 30
    assert clamp_day(2026, 1, 31) == 31


def test_clamp_day_missing_defaults_to_first():
    assert clamp_day(2026, 4, None) == 1
    assert clamp_day(2026, 4, 0) == 1


def test_month_bounds():
    assert month_bounds("2026-02") == (date(2026, 2, 1), date(2026, 2, 28))


def test_parse_iso_date():
    assert parse_iso_date("2026-01-02") == date(2026, 1, 2)
    assert parse_iso_date("2026-02-30") is None
    assert parse_iso_date("02/01/2026") is None
    assert parse_iso_date(None) is None
