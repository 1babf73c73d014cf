"""Built-in fields and the ``sort by`` / ``group by`` instructions."""

from __future__ import annotations

import re
from pathlib import PurePath

from ..task import Task
from .date_field import DateField
from .grouper import Grouper
from .sorter import Sorter

DUE = DateField("due", lambda task: task.due_date)
DONE = DateField("done", lambda task: task.done_date)
SCHEDULED = DateField("scheduled", lambda task: task.scheduled_date)
CREATED = DateField("created", lambda task: task.created_date)
# Tasks without a start date match before/after/on.
START = DateField(
    "start", lambda task: task.start_date, matches_missing=True, aliases=("starts", "started")
)

DATE_FIELDS: tuple[DateField, ...] = (DUE, DONE, SCHEDULED, START, CREATED)

_SORT_BY = re.compile(r"^sort by (\w+)(?: (reverse))?$", re.IGNORECASE)
_GROUP_BY = re.compile(r"^group by (\w+)$", re.IGNORECASE)


def _compare(a, b) -> int:
    return (a > b) - (a < b)


def _priority_comparator(a: Task, b: Task) -> int:
    return _compare(a.priority.value, b.priority.value)


def _description_comparator(a: Task, b: Task) -> int:
    return _compare(a.description.casefold(), b.description.casefold())


def _priority_group(task: Task) -> list[str]:
    return [f"Priority {task.priority.value}: {task.priority.display_name}"]


def _tags_group(task: Task) -> list[str]:
    return list(task.tags) or ["(No tags)"]


def _recurring_group(task: Task) -> list[str]:
    return ["Recurring" if task.is_recurring else "Not Recurring"]


def _recurrence_group(task: Task) -> list[str]:
    return [task.recurrence.to_text() if task.recurrence is not None else "None"]


def _path_group(task: Task) -> list[str]:
    if not task.path:
        return ["Unknown Location"]
    return [str(PurePath(task.path).with_suffix(""))]


GROUPERS: dict[str, Grouper] = {field.name: field.create_grouper() for field in DATE_FIELDS}
GROUPERS.update(
    {
        "priority": Grouper("priority", _priority_group),
        "tags": Grouper("tags", _tags_group),
        "recurring": Grouper("recurring", _recurring_group),
        "recurrence": Grouper("recurrence", _recurrence_group),
        "path": Grouper("path", _path_group),
    }
)

SORT_COMPARATORS = {field.name: field.comparator() for field in DATE_FIELDS}
SORT_COMPARATORS.update(
    {
        "priority": _priority_comparator,
        "description": _description_comparator,
    }
)

DEFAULT_SORTERS: tuple[Sorter, ...] = (
    DUE.create_sorter(),
    Sorter("priority", _priority_comparator),
    Sorter("description", _description_comparator),
)


def parse_group_by(line: str) -> Grouper | None:
    """Grouper for a ``group by <property>`` line, or None."""
    match = _GROUP_BY.match(" ".join(line.split()))
    if match is None:
        return None
    return GROUPERS.get(match.group(1).lower())


def parse_sort_by(line: str) -> Sorter | None:
    """Sorter for a ``sort by <property> [reverse]`` line, or None."""
    match = _SORT_BY.match(" ".join(line.split()))
    if match is None:
        return None
    name = match.group(1).lower()
    comparator = SORT_COMPARATORS.get(name)
    if comparator is None:
        return None
    return Sorter(name, comparator, reverse=match.group(2) is not None)
