"""Ordering and equality helpers for calendar values and reminders."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from .calendar_value import CalendarValue

if TYPE_CHECKING:
    from .reminders import Reminder, ReminderList


def compare_by_date(a: CalendarValue | None, b: CalendarValue | None) -> int:
    """Total order over nullable, possibly invalid dates.

    Present dates sort before missing ones and valid dates before invalid
    ones. Two missing or two invalid dates are equal.

    Returns:
        -1, 0 or 1
    """
    if a is not None and b is None:
        return -1
    if a is None and b is not None:
        return 1
    if a is None or b is None:
        return 0

    if a.is_valid() and not b.is_valid():
        return -1
    if not a.is_valid() and b.is_valid():
        return 1

    if a.is_after(b):
        return 1
    if a.is_before(b):
        return -1
    return 0


def same_date_time(a: CalendarValue, b: CalendarValue) -> bool:
    """Compare two values to the minute."""
    return a.format("%Y-%m-%d %H:%M") == b.format("%Y-%m-%d %H:%M")


def _time_key(reminder: Reminder) -> tuple[bool, datetime]:
    value = reminder.time.value
    return (value is None, value or datetime.min)


def reminders_same(a: ReminderList | None, b: ReminderList | None) -> bool:
    """Order-independent equality of two reminder lists, to the minute."""
    if a is None or b is None:
        return a is None and b is None
    if len(a.reminders) != len(b.reminders):
        return False

    sorted_a = sorted(a.reminders, key=_time_key)
    sorted_b = sorted(b.reminders, key=_time_key)
    return all(
        same_date_time(first.time, second.time) for first, second in zip(sorted_a, sorted_b)
    )
