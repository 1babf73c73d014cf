"""Reminders attached to a task and their textual time formats."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .calendar_value import DATE_FORMAT, CalendarValue
from .config import TimeFormat
from .date_tools import reminders_same

logger = logging.getLogger(__name__)

# Date, then an optional time with an optional (possibly partial) am/pm marker.
REMINDER_VALUE_PATTERN = (
    r"\d{4}-\d{2}-\d{2}(?:[ \t]+\d{1,2}:\d{2}(?:[ \t]*[aApP][mM]?)?)?"
)
_REMINDER_VALUE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})(?:\s*(?P<meridiem>[aApP])[mM]?)?)?$"
)


class ReminderType(Enum):
    """Whether a reminder fires on a day or at a time."""

    DATE = "date"
    DATE_TIME = "date_time"


def format_date_time(value: CalendarValue, time_format: TimeFormat) -> str:
    """Format a value as ``YYYY-MM-DD h:mm am`` or ``YYYY-MM-DD HH:mm``."""
    if value.value is None:
        return value.format()
    moment = value.value
    if time_format is TimeFormat.TWENTY_FOUR_HOUR:
        return f"{moment:%Y-%m-%d %H:%M}"
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{moment:%Y-%m-%d} {hour}:{moment:%M} {meridiem}"


@dataclass(frozen=True)
class Reminder:
    """One reminder: a calendar value and whether it carries a time."""

    time: CalendarValue
    type: ReminderType = ReminderType.DATE_TIME

    def to_text(self, time_format: TimeFormat = TimeFormat.TWELVE_HOUR) -> str:
        if not self.time.is_valid():
            return self.time.to_text()
        if self.type is ReminderType.DATE:
            return self.time.format(DATE_FORMAT)
        return format_date_time(self.time, time_format)

    def __str__(self) -> str:
        return self.to_text()


def parse_reminder(text: str, time_format: TimeFormat) -> Reminder:
    """Parse one reminder value.

    In 12-hour mode a missing meridiem means am, a partial one (``p``) is
    accepted, and hours above 12 are read as 24-hour time. In 24-hour mode the
    meridiem is ignored. Unparseable text gives an invalid reminder.
    """
    text = text.strip()
    match = _REMINDER_VALUE.match(text)
    if match is None:
        logger.debug("Invalid reminder value", extra={"extra_context": {"value": text}})
        return Reminder(CalendarValue.invalid(text), ReminderType.DATE)

    day = CalendarValue.parse(match.group("date"))
    if not day.is_valid():
        logger.debug("Invalid reminder date", extra={"extra_context": {"value": text}})
        return Reminder(CalendarValue.invalid(text), ReminderType.DATE)

    if match.group("hour") is None:
        return Reminder(day, ReminderType.DATE)

    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    meridiem = (match.group("meridiem") or "").lower()
    if time_format is TimeFormat.TWELVE_HOUR and 1 <= hour <= 12:
        hour = hour % 12
        if meridiem == "p":
            hour += 12

    if hour > 23 or minute > 59:
        logger.debug("Invalid reminder time", extra={"extra_context": {"value": text}})
        return Reminder(CalendarValue.invalid(text), ReminderType.DATE_TIME)

    moment = day.value.replace(hour=hour, minute=minute)
    return Reminder(CalendarValue(value=moment, source=text), ReminderType.DATE_TIME)


@dataclass(frozen=True, eq=False)
class ReminderList:
    """Ordered reminders of one task. Equality ignores order."""

    reminders: tuple[Reminder, ...] = ()

    @classmethod
    def parse(cls, text: str, time_format: TimeFormat) -> ReminderList:
        """Parse a comma-separated list of reminder values."""
        segments = [segment for segment in text.split(",") if segment.strip()]
        return cls(tuple(parse_reminder(segment, time_format) for segment in segments))

    def to_text(self, time_format: TimeFormat = TimeFormat.TWELVE_HOUR) -> str:
        return ", ".join(reminder.to_text(time_format) for reminder in self.reminders)

    def __len__(self) -> int:
        return len(self.reminders)

    def __iter__(self):
        return iter(self.reminders)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReminderList):
            return NotImplemented
        return reminders_same(self, other)

    def __hash__(self) -> int:
        return hash(len(self.reminders))

    def __str__(self) -> str:
        return self.to_text()
