"""Read and write the emoji marker format of task lines.

A task body looks like::

    Pay rent #home 🔼 ➕ 2024-01-01 📅 2024-02-01 🔁 every month ⏰ 2024-01-31 9:00 am ^rent

Markers are matched at the end of the text, one after another, so each
marker's value runs up to the next marker or the end of the line. Whatever
is left is the description.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .calendar_value import DATE_FORMAT, CalendarValue
from .config import TimeFormat
from .recurrence import Recurrence
from .reminders import REMINDER_VALUE_PATTERN, ReminderList
from .task import HASHTAGS_FROM_END, Priority, Task, extract_hashtags

logger = logging.getLogger(__name__)

MAX_PARSE_PASSES = 20
_VARIATION_SELECTOR = "\ufe0f?"
_DATE_VALUE = r"(\d{4}-\d{2}-\d{2})"
_BLOCK_LINK = re.compile(r"(?:^|\s)\^([a-zA-Z0-9-]+)$")


@dataclass(frozen=True)
class TaskSymbols:
    """Marker symbols. The first entry of each tuple is the one written."""

    priority_symbols: dict[Priority, str] = field(
        default_factory=lambda: {
            Priority.HIGHEST: "🔺",
            Priority.HIGH: "⏫",
            Priority.MEDIUM: "🔼",
            Priority.LOW: "🔽",
            Priority.LOWEST: "⏬",
        }
    )
    created_date: tuple[str, ...] = ("➕",)
    start_date: tuple[str, ...] = ("🛫",)
    scheduled_date: tuple[str, ...] = ("⏳", "⌛")
    due_date: tuple[str, ...] = ("📅", "📆", "🗓")
    done_date: tuple[str, ...] = ("✅",)
    recurrence: tuple[str, ...] = ("🔁",)
    reminder: tuple[str, ...] = ("⏰", "⏲")


DEFAULT_SYMBOLS = TaskSymbols()


def _alternatives(symbols: tuple[str, ...]) -> str:
    return "(?:" + "|".join(re.escape(symbol) for symbol in symbols) + ")" + _VARIATION_SELECTOR


class DefaultTaskSerializer:
    """Converts between task bodies and ``Task`` objects."""

    # Canonical order of the date fields on a written line.
    DATE_FIELDS = ("created_date", "start_date", "scheduled_date", "due_date", "done_date")

    def __init__(
        self,
        symbols: TaskSymbols = DEFAULT_SYMBOLS,
        time_format: TimeFormat = TimeFormat.TWELVE_HOUR,
    ) -> None:
        self.symbols = symbols
        self.time_format = time_format

        self._symbol_to_priority = {
            symbol: priority for priority, symbol in symbols.priority_symbols.items()
        }
        priority_class = "|".join(re.escape(symbol) for symbol in self._symbol_to_priority)
        self._priority_regex = re.compile(f"({priority_class}){_VARIATION_SELECTOR}$")

        # Matched in this order on every pass, innermost (last written) first.
        self._date_regexes = [
            (
                name,
                re.compile(_alternatives(getattr(symbols, name)) + r" *" + _DATE_VALUE + "$"),
            )
            for name in ("done_date", "due_date", "scheduled_date", "start_date", "created_date")
        ]
        self._recurrence_regex = re.compile(
            _alternatives(symbols.recurrence) + r" ?([a-zA-Z0-9, !]+)$"
        )
        self._reminder_regex = re.compile(
            _alternatives(symbols.reminder)
            + rf" *({REMINDER_VALUE_PATTERN}(?:[ \t]*,[ \t]*{REMINDER_VALUE_PATTERN})*)$"
        )

    def deserialize(self, line: str) -> Task:
        """Parse a task body into a Task.

        Never raises: malformed dates become invalid calendar values and
        unrecognized text stays in the description.
        """
        values: dict[str, CalendarValue] = {}
        priority = Priority.NONE
        recurrence_text = ""
        reminders = ReminderList()
        trailing_tags = ""
        block_link = ""

        block_match = _BLOCK_LINK.search(line)
        if block_match is not None:
            block_link = "^" + block_match.group(1)
            line = line[: block_match.start()].rstrip()

        passes = 0
        matched = True
        while matched and passes < MAX_PARSE_PASSES:
            matched = False

            priority_match = self._priority_regex.search(line)
            if priority_match is not None:
                priority = self._symbol_to_priority[priority_match.group(1)]
                line = line[: priority_match.start()].strip()
                matched = True

            for name, regex in self._date_regexes:
                date_match = regex.search(line)
                if date_match is not None:
                    values[name] = self._parse_date(name, date_match.group(1))
                    line = line[: date_match.start()].strip()
                    matched = True

            recurrence_match = self._recurrence_regex.search(line)
            if recurrence_match is not None:
                recurrence_text = recurrence_match.group(1).strip()
                line = line[: recurrence_match.start()].strip()
                matched = True

            reminder_match = self._reminder_regex.search(line)
            if reminder_match is not None:
                reminders = ReminderList.parse(reminder_match.group(1), self.time_format)
                line = line[: reminder_match.start()].strip()
                matched = True

            # Tags at the end are lifted off so the markers before them can be
            # reached, and put back on the description afterwards.
            tag_match = HASHTAGS_FROM_END.search(line)
            if tag_match is not None:
                tag = tag_match.group(0).strip()
                trailing_tags = f"{tag} {trailing_tags}" if trailing_tags else tag
                line = line[: tag_match.start()].strip()
                matched = True

            passes += 1

        recurrence = None
        if recurrence_text:
            recurrence = Recurrence.from_text(
                recurrence_text,
                start_date=values.get("start_date"),
                scheduled_date=values.get("scheduled_date"),
                due_date=values.get("due_date"),
            )

        if trailing_tags:
            line = f"{line} {trailing_tags}"

        return Task(
            description=line,
            priority=priority,
            created_date=values.get("created_date"),
            start_date=values.get("start_date"),
            scheduled_date=values.get("scheduled_date"),
            due_date=values.get("due_date"),
            done_date=values.get("done_date"),
            recurrence=recurrence,
            reminders=reminders,
            tags=extract_hashtags(line),
            block_link=block_link,
        )

    def serialize(self, task: Task) -> str:
        """Write a task body in canonical marker order.

        Absent fields are left out, so an empty task gives ``""``.
        """
        parts = [task.description]

        if task.priority is not Priority.NONE:
            parts.append(f" {self.symbols.priority_symbols[task.priority]}")

        for name in self.DATE_FIELDS:
            value: CalendarValue | None = getattr(task, name)
            if value is not None:
                parts.append(f" {getattr(self.symbols, name)[0]} {value.to_text(DATE_FORMAT)}")

        if task.recurrence is not None:
            parts.append(f" {self.symbols.recurrence[0]} {task.recurrence.to_text()}")

        if task.reminders:
            parts.append(f" {self.symbols.reminder[0]} {task.reminders.to_text(self.time_format)}")

        if task.block_link:
            parts.append(f" {task.block_link}")

        return "".join(parts)

    def _parse_date(self, name: str, text: str) -> CalendarValue:
        value = CalendarValue.parse(text, DATE_FORMAT)
        if not value.is_valid():
            logger.debug(
                "Invalid date in task line",
                extra={"extra_context": {"field": name, "value": text}},
            )
        return value
