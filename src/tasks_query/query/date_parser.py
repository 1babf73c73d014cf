"""Resolve the date part of a filter instruction to one concrete day.

Relative phrases are resolved against ``today``; anything else goes through
``dateutil.parser``. The result is always the start of a day, or an invalid
value when the text cannot be understood.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from ..calendar_value import CalendarValue

_WEEKDAYS = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}
_UNITS = {
    "day": lambda n: relativedelta(days=n),
    "week": lambda n: relativedelta(weeks=n),
    "month": lambda n: relativedelta(months=n),
    "year": lambda n: relativedelta(years=n),
}

_IN_N_UNITS = re.compile(r"^in\s+(\d+)\s+(day|week|month|year)s?$")
_N_UNITS_AGO = re.compile(r"^(\d+)\s+(day|week|month|year)s?\s+ago$")
_NEXT_LAST_UNIT = re.compile(r"^(next|last)\s+(week|month|year)$")
_WEEKDAY = re.compile(r"^(?:(next|last|this)\s+)?(monday|tuesday|wednesday|thursday|friday|saturday|sunday)$")


def _relative_day(text: str, today: date) -> date | None:
    if text == "today":
        return today
    if text == "tomorrow":
        return today + timedelta(days=1)
    if text == "yesterday":
        return today - timedelta(days=1)

    match = _IN_N_UNITS.match(text)
    if match:
        return today + _UNITS[match.group(2)](int(match.group(1)))

    match = _N_UNITS_AGO.match(text)
    if match:
        return today - _UNITS[match.group(2)](int(match.group(1)))

    match = _NEXT_LAST_UNIT.match(text)
    if match:
        step = 1 if match.group(1) == "next" else -1
        return today + _UNITS[match.group(2)](step)

    match = _WEEKDAY.match(text)
    if match:
        weekday = _WEEKDAYS[match.group(2)]
        if match.group(1) == "next":
            return today + relativedelta(days=1, weekday=weekday(+1))
        if match.group(1) == "last":
            return today + relativedelta(days=-1, weekday=weekday(-1))
        # A bare weekday looks forward, today included.
        return today + relativedelta(weekday=weekday(+1))

    return None


def parse_date(text: str, *, today: date | None = None) -> CalendarValue:
    """Resolve an absolute or relative date expression.

    Args:
        text: e.g. ``2024-01-02``, ``tomorrow``, ``in 3 weeks``, ``next friday``
        today: reference day for relative phrases (defaults to the current day)

    Returns:
        Start of the resolved day, or an invalid value
    """
    if today is None:
        today = date.today()
    normalized = " ".join(text.lower().split())
    if not normalized:
        return CalendarValue.invalid(text)

    try:
        relative = _relative_day(normalized, today)
        if relative is not None:
            return CalendarValue.of(relative)
        parsed = dateutil_parser.parse(normalized, default=datetime.combine(today, time()))
    except (ValueError, OverflowError):
        # Unknown text, or a relative phrase landing outside the supported years.
        return CalendarValue.invalid(text)
    return CalendarValue.of(parsed.date())
