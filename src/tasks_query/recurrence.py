"""Recurrence rules written after the recurrence marker.

The rule text is kept verbatim for writing the line back. A schedule is built
with ``dateutil.rrule`` for the rules understood here; other text keeps its
text and has no schedule.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, time

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, YEARLY, rrule

from .calendar_value import CalendarValue

# Start of rules with no anchor date; replaced before iterating.
UNANCHORED_START = datetime(2000, 1, 3)

_RULE = re.compile(r"^every\s+(?P<body>.+?)(?P<when_done>\s+when\s+done)?$", re.IGNORECASE)
_UNIT = re.compile(
    r"^(?:(?P<interval>\d+)\s+)?(?P<unit>day|week|month|year)s?(?:\s+on\s+(?P<days>.+))?$",
    re.IGNORECASE,
)
_DAY_SEPARATOR = re.compile(r"\s*(?:,|\band\b)\s*", re.IGNORECASE)

_FREQUENCIES = {"day": DAILY, "week": WEEKLY, "month": MONTHLY, "year": YEARLY}
_WEEKDAYS = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}


def _parse_weekdays(text: str) -> list | None:
    names = [name.lower() for name in _DAY_SEPARATOR.split(text.strip()) if name]
    if not names or any(name not in _WEEKDAYS for name in names):
        return None
    return [_WEEKDAYS[name] for name in names]


def _build_rule(rule_text: str, dtstart: datetime) -> tuple[rrule | None, bool]:
    """Return the schedule for the text (or None) and the 'when done' flag."""
    match = _RULE.match(rule_text.strip())
    if match is None:
        return None, False
    body = match.group("body").strip()
    when_done = match.group("when_done") is not None

    if body.lower() == "weekday":
        return rrule(DAILY, byweekday=(MO, TU, WE, TH, FR), dtstart=dtstart), when_done

    unit = _UNIT.match(body)
    if unit is not None:
        interval = int(unit.group("interval") or 1)
        byweekday = None
        if unit.group("days"):
            byweekday = _parse_weekdays(unit.group("days"))
            if byweekday is None:
                return None, when_done
        frequency = _FREQUENCIES[unit.group("unit").lower()]
        return rrule(frequency, interval=interval, byweekday=byweekday, dtstart=dtstart), when_done

    weekdays = _parse_weekdays(body)
    if weekdays is not None:
        return rrule(WEEKLY, byweekday=weekdays, dtstart=dtstart), when_done
    return None, when_done
@dataclass(frozen=True)
class Recurrence:
    """A recurrence rule anchored at one of the task's dates.

    Without an anchor date the rule is kept at a fixed placeholder start and
    re-anchored at the day ``next_occurrence`` is asked about, so building a
    recurrence never reads the clock.
    """

    rule_text: str
    base_date: CalendarValue | None = field(default=None, compare=False)
    when_done: bool = field(default=False, compare=False)
    rule: rrule | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_text(
        cls,
        rule_text: str,
        *,
        start_date: CalendarValue | None = None,
        scheduled_date: CalendarValue | None = None,
        due_date: CalendarValue | None = None,
    ) -> Recurrence:
        """Build a recurrence, anchored at the due, scheduled or start date."""
        base_date = next(
            (
                candidate
                for candidate in (due_date, scheduled_date, start_date)
                if candidate is not None and candidate.is_valid()
            ),
            None,
        )
        dtstart = base_date.value if base_date is not None else UNANCHORED_START
        rule, when_done = _build_rule(rule_text, dtstart)
        return cls(rule_text=rule_text.strip(), base_date=base_date, when_done=when_done, rule=rule)

    def has_schedule(self) -> bool:
        return self.rule is not None

    def next_occurrence(self, after: datetime | None = None) -> datetime | None:
        """First occurrence strictly after ``after``.

        ``after`` defaults to the base date, or to now for an unanchored rule.
        An unanchored rule starts at midnight of the day of ``after``.
        """
        if self.rule is None:
            return None
        rule = self.rule
        if self.base_date is None:
            if after is None:
                after = datetime.now()
            rule = rule.replace(dtstart=datetime.combine(after.date(), time()))
        elif after is None:
            after = self.base_date.value
        return rule.after(after)

    def to_text(self) -> str:
        return self.rule_text

    def __str__(self) -> str:
        return self.rule_text
