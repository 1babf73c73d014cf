"""Tests for calendar_value module."""

from datetime import date, datetime

import pytest

from tasks_query.calendar_value import CalendarValue


def test_parse_valid_date() -> None:
    """Test parsing a well-formed date."""
    value = CalendarValue.parse("2024-01-02")

    assert value.is_valid()
    assert value.value == datetime(2024, 1, 2)
    assert value.format() == "2024-01-02"


def test_parse_impossible_date_is_invalid() -> None:
    """Test that a date-shaped but impossible value is invalid, not missing."""
    value = CalendarValue.parse("2021-13-45")

    assert value is not None
    assert not value.is_valid()
    assert value.format() == "Invalid date"
    assert value.to_text() == "2021-13-45"


def test_equality_ignores_source_text() -> None:
    """Test that values built different ways compare equal."""
    assert CalendarValue.parse("2024-01-02") == CalendarValue.of(date(2024, 1, 2))


def test_comparisons() -> None:
    """Test before, after and same."""
    early = CalendarValue.of(date(2024, 1, 1))
    late = CalendarValue.of(date(2024, 1, 2))

    assert early.is_before(late)
    assert late.is_after(early)
    assert early.is_same(CalendarValue.of(date(2024, 1, 1)))
    assert not early.is_after(late)


def test_comparisons_with_invalid_are_false() -> None:
    """Test that an invalid value is neither before, after nor same as anything."""
    valid = CalendarValue.of(date(2024, 1, 1))
    invalid = CalendarValue.invalid("nonsense")

    assert not invalid.is_before(valid)
    assert not invalid.is_after(valid)
    assert not invalid.is_same(valid)
    assert not valid.is_before(invalid)


def test_has_time() -> None:
    """Test time-of-day detection."""
    assert not CalendarValue.of(date(2024, 1, 1)).has_time()
    assert CalendarValue.of(datetime(2024, 1, 1, 9, 30)).has_time()
    assert CalendarValue.of(datetime(2024, 1, 1, 9, 30)).start_of_day() == CalendarValue.of(
        date(2024, 1, 1)
    )


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2024, 1, 2), "2024-01-02 (Tuesday 2nd January 2024)"),
        (date(2024, 1, 1), "2024-01-01 (Monday 1st January 2024)"),
        (date(2024, 1, 11), "2024-01-11 (Thursday 11th January 2024)"),
        (date(2024, 1, 23), "2024-01-23 (Tuesday 23rd January 2024)"),
    ],
)
def test_format_long(day: date, expected: str) -> None:
    """Test the long form used in filter explanations."""
    assert CalendarValue.of(day).format_long() == expected
