"""Tests for date_tools module."""

from datetime import date, datetime
from functools import cmp_to_key

from tasks_query.calendar_value import CalendarValue
from tasks_query.date_tools import compare_by_date, reminders_same, same_date_time
from tasks_query.reminders import Reminder, ReminderList

A = CalendarValue.of(date(2024, 1, 1))
B = CalendarValue.of(date(2024, 1, 2))
C = CalendarValue.of(date(2024, 1, 3))
INVALID = CalendarValue.invalid("2024-99-99")


class TestCompareByDate:
    """Tests for compare_by_date."""

    def test_chronological(self):
        """Test that valid dates sort chronologically."""
        assert compare_by_date(A, B) == -1
        assert compare_by_date(B, A) == 1
        assert compare_by_date(A, CalendarValue.of(date(2024, 1, 1))) == 0

    def test_present_sorts_before_missing(self):
        """Test that a task with a date sorts before a task without one."""
        assert compare_by_date(A, None) == -1
        assert compare_by_date(None, A) == 1
        assert compare_by_date(INVALID, None) == -1

    def test_valid_sorts_before_invalid(self):
        """Test that valid dates sort before invalid ones."""
        assert compare_by_date(C, INVALID) == -1
        assert compare_by_date(INVALID, A) == 1

    def test_equal_cases(self):
        """Test that two missing or two invalid values are equal."""
        assert compare_by_date(None, None) == 0
        assert compare_by_date(INVALID, CalendarValue.invalid("other")) == 0

    def test_total_order_when_sorting(self):
        """Test sorting a mixed list."""
        values = [None, INVALID, C, A, B]
        assert sorted(values, key=cmp_to_key(compare_by_date)) == [A, B, C, INVALID, None]


def test_same_date_time_to_the_minute() -> None:
    """Test minute-resolution comparison."""
    first = CalendarValue.of(datetime(2024, 1, 1, 9, 30, 10))
    second = CalendarValue.of(datetime(2024, 1, 1, 9, 30, 50))
    assert same_date_time(first, second)
    assert not same_date_time(first, CalendarValue.of(datetime(2024, 1, 1, 9, 31)))


class TestRemindersSame:
    """Tests for reminders_same."""

    def test_order_independent(self):
        """Test that the same reminders in another order are equal."""
        first = ReminderList((Reminder(A), Reminder(B)))
        second = ReminderList((Reminder(B), Reminder(A)))
        assert reminders_same(first, second)
        assert first == second

    def test_different_lengths(self):
        """Test that lists of different lengths differ."""
        assert not reminders_same(ReminderList((Reminder(A),)), ReminderList((Reminder(A), Reminder(A))))

    def test_different_times(self):
        """Test that different times differ."""
        assert not reminders_same(ReminderList((Reminder(A),)), ReminderList((Reminder(B),)))

    def test_none_handling(self):
        """Test that None only equals None."""
        assert reminders_same(None, None)
        assert not reminders_same(None, ReminderList())
        assert not reminders_same(ReminderList(), None)

    def test_seconds_are_ignored(self):
        """Test that reminders in the same minute are the same."""
        first = ReminderList((Reminder(CalendarValue.of(datetime(2024, 1, 1, 9, 30, 5))),))
        second = ReminderList((Reminder(CalendarValue.of(datetime(2024, 1, 1, 9, 30, 45))),))
        assert reminders_same(first, second)
