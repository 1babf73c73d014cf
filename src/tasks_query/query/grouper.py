"""Groupers map a task to the names of the groups it belongs in."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..task import Task

GroupingFunction = Callable[[Task], Sequence[str]]


@dataclass(frozen=True)
class Grouper:
    """One ``group by`` instruction."""

    name: str
    grouper: GroupingFunction

    def group_keys(self, task: Task) -> list[str]:
        """Distinct group names for the task; ``[""]`` when it has none."""
        keys = list(dict.fromkeys(self.grouper(task)))
        return keys or [""]
