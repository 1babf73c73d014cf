"""Filter, sort and group instructions shared by every date field.

Each date field (due, done, scheduled, start, created) is a ``DateField``
value holding its name, how to read the date from a task, and whether tasks
without the date match relational filters. All instructions are built from
those three things.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from ..calendar_value import CalendarValue
from ..date_tools import compare_by_date
from ..task import Task
from .date_parser import parse_date
from .filter import FilterInstructions, FilterOrErrorMessage
from .grouper import Grouper
from .sorter import Comparator, Sorter

logger = logging.getLogger(__name__)

DateAccessor = Callable[[Task], CalendarValue | None]


@dataclass(frozen=True)
class DateField:
    """A date-typed task field.

    Attributes:
        name: Name used in instructions and explanations, e.g. ``due``
        accessor: Returns the task's value for this field, or None
        matches_missing: Whether tasks without the date match before/after/on
        aliases: Extra keywords accepted in relational instructions
    """

    name: str
    accessor: DateAccessor
    matches_missing: bool = False
    aliases: tuple[str, ...] = ()

    def date(self, task: Task) -> CalendarValue | None:
        return self.accessor(task)

    def _keywords(self) -> str:
        return "|".join(re.escape(keyword) for keyword in (self.name, *self.aliases))

    def filter_regexp(self) -> re.Pattern[str]:
        return re.compile(
            rf"^(?:{self._keywords()})(?:\s+date)?\s+(?:(before|after|on)\s+)?(.*)$",
            re.IGNORECASE,
        )

    def filter_instructions(self) -> FilterInstructions:
        instructions = FilterInstructions()
        instructions.add(f"has {self.name} date", lambda task: self.date(task) is not None)
        instructions.add(f"no {self.name} date", lambda task: self.date(task) is None)

        def is_invalid(task: Task) -> bool:
            value = self.date(task)
            return value is not None and not value.is_valid()

        instructions.add(f"{self.name} date is invalid", is_invalid)
        return instructions

    def can_create_filter_for_line(self, line: str) -> bool:
        line = line.strip()
        if self.filter_instructions().can_create_filter_for_line(line):
            return True
        return self.filter_regexp().match(line) is not None

    def create_filter_or_error_message(
        self, line: str, *, today: datetime.date | None = None
    ) -> FilterOrErrorMessage:
        """Parse one instruction line for this field.

        Never raises; problems come back as the result's ``error``.
        """
        line = line.strip()
        instructions = self.filter_instructions()
        if instructions.can_create_filter_for_line(line):
            return instructions.create_filter_or_error_message(line)

        match = self.filter_regexp().match(line)
        if match is None:
            return FilterOrErrorMessage.from_error(
                line, f"do not understand query filter ({self.name} date)"
            )

        keyword = (match.group(1) or "on").lower()
        target = parse_date(match.group(2), today=today)
        if not target.is_valid():
            logger.debug(
                "Unparseable date in filter",
                extra={"extra_context": {"field": self.name, "instruction": line}},
            )
            return FilterOrErrorMessage.from_error(line, f"do not understand {self.name} date")

        if keyword == "before":
            relation = CalendarValue.is_before
        elif keyword == "after":
            relation = CalendarValue.is_after
        else:
            relation = CalendarValue.is_same

        def predicate(task: Task) -> bool:
            value = self.date(task)
            if value is None:
                return self.matches_missing
            return relation(value, target)

        explanation = self.explanation(keyword, target)
        return FilterOrErrorMessage.from_filter(line, predicate, explanation)

    def explanation(self, keyword: str, target: CalendarValue) -> str:
        """e.g. ``due date is before 2024-01-02 (Tuesday 2nd January 2024)``."""
        relationship = keyword if keyword in ("before", "after") else "on"
        text = f"{self.name} date is {relationship} {target.format_long()}"
        if self.matches_missing:
            text += f" OR no {self.name} date"
        return text

    def comparator(self) -> Comparator:
        return lambda a, b: compare_by_date(self.date(a), self.date(b))

    def create_sorter(self, reverse: bool = False) -> Sorter:
        return Sorter(self.name, self.comparator(), reverse)

    def create_grouper(self) -> Grouper:
        def group_names(task: Task) -> list[str]:
            value = self.date(task)
            if value is None:
                return [f"No {self.name} date"]
            if not value.is_valid():
                return [f"Invalid {self.name} date"]
            return [value.format("%Y-%m-%d %A")]

        return Grouper(self.name, group_names)
