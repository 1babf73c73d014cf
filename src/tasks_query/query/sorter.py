"""Sorters order tasks by one property."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import cmp_to_key

from ..task import Task

Comparator = Callable[[Task, Task], int]


@dataclass(frozen=True)
class Sorter:
    """One ``sort by`` instruction."""

    name: str
    comparator: Comparator
    reverse: bool = False

    def compare(self, a: Task, b: Task) -> int:
        result = self.comparator(a, b)
        return -result if self.reverse else result


def sort_tasks(tasks: Iterable[Task], sorters: Sequence[Sorter]) -> list[Task]:
    """Stable sort applying sorters in order; later ones break ties."""

    def compare(a: Task, b: Task) -> int:
        for sorter in sorters:
            result = sorter.compare(a, b)
            if result != 0:
                return result
        return 0

    return sorted(tasks, key=cmp_to_key(compare))
