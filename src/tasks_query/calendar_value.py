"""Point-in-time values that may fail to parse.

A task field that is absent is ``None``. A field that is present but could not
be parsed is an invalid ``CalendarValue``, which still remembers the text it
was read from so the line can be written back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time

DATE_FORMAT = "%Y-%m-%d"
INVALID_DATE_TEXT = "Invalid date"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


@dataclass(frozen=True)
class CalendarValue:
    """A possibly invalid point in time."""

    value: datetime | None
    source: str = field(default="", compare=False)

    @classmethod
    def of(cls, value: date | datetime) -> CalendarValue:
        """Wrap a date or datetime. Dates become midnight."""
        if not isinstance(value, datetime):
            value = datetime.combine(value, time())
        return cls(value=value.replace(tzinfo=None))

    @classmethod
    def invalid(cls, source: str = "") -> CalendarValue:
        return cls(value=None, source=source)

    @classmethod
    def parse(cls, text: str, fmt: str = DATE_FORMAT) -> CalendarValue:
        """Parse text with a strptime format, giving an invalid value on failure."""
        try:
            parsed = datetime.strptime(text.strip(), fmt)
        except ValueError:
            return cls.invalid(text)
        return cls(value=parsed, source=text)

    def is_valid(self) -> bool:
        return self.value is not None

    def has_time(self) -> bool:
        """True when the value carries a time of day other than midnight."""
        return self.value is not None and self.value.time() != time()

    def is_before(self, other: CalendarValue) -> bool:
        if self.value is None or other.value is None:
            return False
        return self.value < other.value

    def is_after(self, other: CalendarValue) -> bool:
        if self.value is None or other.value is None:
            return False
        return self.value > other.value

    def is_same(self, other: CalendarValue) -> bool:
        if self.value is None or other.value is None:
            return False
        return self.value == other.value

    def start_of_day(self) -> CalendarValue:
        if self.value is None:
            return self
        return CalendarValue(value=datetime.combine(self.value.date(), time()))

    def format(self, fmt: str = DATE_FORMAT) -> str:
        """Format with a strftime pattern, or ``Invalid date``."""
        if self.value is None:
            return INVALID_DATE_TEXT
        return self.value.strftime(fmt)

    def format_long(self) -> str:
        """Format as ``2024-01-02 (Tuesday 2nd January 2024)``."""
        if self.value is None:
            return INVALID_DATE_TEXT
        value = self.value
        return (
            f"{value:%Y-%m-%d} "
            f"({value:%A} {_ordinal(value.day)} {value:%B} {value.year})"
        )

    def to_text(self, fmt: str = DATE_FORMAT) -> str:
        """Text for writing back to a task line.

        Invalid values give back the text they were parsed from.
        """
        if self.value is None and self.source:
            return self.source
        return self.format(fmt)

    def __str__(self) -> str:
        return self.format()
