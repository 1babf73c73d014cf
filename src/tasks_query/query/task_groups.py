"""Split a sorted task list into named, ordered groups.

Grouping runs in three separate steps:

1. ``TaskGroupingTree`` puts every task into one bucket per combination of
   group names (the Cartesian product over the groupers' names for it).
2. ``TaskGroups`` sorts the buckets by their names, level by level.
3. ``GroupDisplayHeadingSelector`` walks the sorted buckets and decides which
   headings to show, skipping a heading that repeats the one above it.
"""

from __future__ import annotations

import itertools
import logging
import re
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..task import Task
from .grouper import Grouper

logger = logging.getLogger(__name__)

_DIGIT_RUNS = re.compile(r"(\d+)")

GroupNames = tuple[str, ...]


def natural_sort_key(text: str) -> tuple:
    """Case- and accent-insensitive key comparing digit runs as numbers.

    The raw text breaks remaining ties so the order is total.
    """
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(char for char in folded if not unicodedata.combining(char)).casefold()
    chunks = _DIGIT_RUNS.split(folded)
    # split() puts text at even indexes and digit runs at odd ones.
    key = tuple(int(chunk) if index % 2 else chunk for index, chunk in enumerate(chunks))
    return (key, text)


class TaskGroupingTree:
    """Buckets of tasks keyed by their group names, in creation order."""

    def __init__(self, groupers: Sequence[Grouper], tasks: Iterable[Task]) -> None:
        self._buckets: dict[GroupNames, list[Task]] = {}

        if not groupers:
            self._buckets[()] = list(tasks)
            return

        for task in tasks:
            names_per_level = [grouper.group_keys(task) for grouper in groupers]
            for names in itertools.product(*names_per_level):
                self._buckets.setdefault(names, []).append(task)

    @property
    def groups(self) -> dict[GroupNames, list[Task]]:
        return self._buckets


@dataclass(frozen=True)
class GroupDisplayHeading:
    """A heading to show above a group, at a nesting level starting at 0."""

    nesting_level: int
    display_name: str


class GroupDisplayHeadingSelector:
    """Chooses headings for groups visited in display order.

    A heading is shown when its name differs from the last one shown at the
    same level. Showing a heading clears the levels below it, so they are
    shown again under the new parent.
    """

    def __init__(self, level_count: int) -> None:
        self._last_heading_at_level: list[str | None] = [None] * level_count

    def headings_for(self, group_names: GroupNames) -> list[GroupDisplayHeading]:
        headings: list[GroupDisplayHeading] = []
        for level, name in enumerate(group_names):
            if name != self._last_heading_at_level[level]:
                headings.append(GroupDisplayHeading(level, name))
                for deeper in range(level, len(group_names)):
                    self._last_heading_at_level[deeper] = None
                self._last_heading_at_level[level] = name
        return headings


@dataclass(frozen=True)
class TaskGroup:
    """One bucket of tasks with its group names and display headings."""

    group_names: GroupNames
    tasks: tuple[Task, ...]
    group_headings: tuple[GroupDisplayHeading, ...] = ()

    def __str__(self) -> str:
        lines = [f"Group names: [{','.join(self.group_names)}]"]
        for heading in self.group_headings:
            lines.append(f"{'#' * (4 + heading.nesting_level)} {heading.display_name}")
        for task in self.tasks:
            lines.append(f"- [{task.status_symbol}] {task.description}")
        return "\n".join(lines) + "\n"


class TaskGroups:
    """All groups produced by a query, in display order.

    Args:
        groupers: one per ``group by`` line, in the order written
        tasks: the matching tasks, already sorted
    """

    def __init__(self, groupers: Sequence[Grouper], tasks: Iterable[Task]) -> None:
        tasks = list(tasks)
        # A task can sit in several groups, so count before grouping.
        self._total_task_count = len(tasks)

        tree = TaskGroupingTree(groupers, tasks)
        ordered = sorted(tree.groups.items(), key=lambda item: _group_sort_key(item[0]))

        selector = GroupDisplayHeadingSelector(len(groupers))
        self._groups = [
            TaskGroup(names, tuple(bucket), tuple(selector.headings_for(names)))
            for names, bucket in ordered
        ]
        logger.debug(
            "Grouped tasks",
            extra={
                "extra_context": {
                    "groupers": [grouper.name for grouper in groupers],
                    "group_count": len(self._groups),
                    "task_count": self._total_task_count,
                }
            },
        )

    @property
    def groups(self) -> list[TaskGroup]:
        return self._groups

    def total_tasks_count(self) -> int:
        """Number of distinct tasks, not the sum of the group sizes."""
        return self._total_task_count

    def __iter__(self):
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __str__(self) -> str:
        output = "".join(f"\n{group}\n---\n" for group in self._groups)
        return output + f"\n{self._total_task_count} tasks\n"


def _group_sort_key(group_names: GroupNames) -> tuple:
    return tuple(natural_sort_key(name) for name in group_names)
