"""Structured task records built from markdown task lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from .calendar_value import CalendarValue
from .recurrence import Recurrence
from .reminders import ReminderList

if TYPE_CHECKING:
    from .serializer import DefaultTaskSerializer

# Indentation (including blockquote/callout '>'), list marker, checkbox, body.
TASK_LINE_PATTERN = re.compile(
    r"^(?P<indentation>[\s\t>]*)(?P<marker>[-*+]|[0-9]+[.)]) +\[(?P<status>.)\] *(?P<body>.*)$"
)
HASHTAG_PATTERN = re.compile(r"(^|\s)#[^ !@#$%^&*(),.?\":{}|<>]+")
HASHTAGS_FROM_END = re.compile(HASHTAG_PATTERN.pattern + r"$")


class Priority(Enum):
    """Task priority, from most to least urgent."""

    HIGHEST = 0
    HIGH = 1
    MEDIUM = 2
    NONE = 3
    LOW = 4
    LOWEST = 5

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


def extract_hashtags(text: str) -> tuple[str, ...]:
    """Return the ``#tags`` in text, in order of appearance."""
    return tuple(match.group(0).strip() for match in HASHTAG_PATTERN.finditer(text))


@dataclass(frozen=True)
class Task:
    """An immutable task.

    ``description`` keeps any tags; ``tags`` lists them separately. The
    markdown context (``status_symbol``, ``indentation``, ``list_marker``,
    ``path``, ``line_number``) is only set for tasks read from files.
    """

    description: str = ""
    priority: Priority = Priority.NONE
    created_date: CalendarValue | None = None
    start_date: CalendarValue | None = None
    scheduled_date: CalendarValue | None = None
    due_date: CalendarValue | None = None
    done_date: CalendarValue | None = None
    recurrence: Recurrence | None = None
    reminders: ReminderList = field(default_factory=ReminderList)
    tags: tuple[str, ...] = ()
    block_link: str = ""
    status_symbol: str = " "
    indentation: str = ""
    list_marker: str = "-"
    path: str = ""
    line_number: int | None = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def is_done(self) -> bool:
        return self.status_symbol in ("x", "X")

    @classmethod
    def from_line(
        cls,
        line: str,
        serializer: DefaultTaskSerializer,
        *,
        path: str = "",
        line_number: int | None = None,
        global_filter: str = "",
    ) -> Task | None:
        """Parse one markdown line; None when it is not a task.

        Lines without the global filter text are not tasks.
        """
        match = TASK_LINE_PATTERN.match(line.rstrip("\r\n"))
        if match is None:
            return None
        body = match.group("body").strip()
        if global_filter and global_filter not in body:
            return None

        details = serializer.deserialize(body)
        return replace(
            details,
            status_symbol=match.group("status"),
            indentation=match.group("indentation"),
            list_marker=match.group("marker"),
            path=path,
            line_number=line_number,
        )

    def to_file_line(self, serializer: DefaultTaskSerializer) -> str:
        """Rebuild the markdown line for this task."""
        body = serializer.serialize(self)
        return f"{self.indentation}{self.list_marker} [{self.status_symbol}] {body}"
