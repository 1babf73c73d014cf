"""Parse a query block and apply it to tasks."""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..task import Task
from .fields import DATE_FIELDS, DEFAULT_SORTERS, parse_group_by, parse_sort_by
from .filter import Filter
from .grouper import Grouper
from .sorter import Sorter, sort_tasks
from .task_groups import TaskGroups

logger = logging.getLogger(__name__)

_LIMIT = re.compile(r"^limit(?: to)? (\d+)(?: tasks?)?$", re.IGNORECASE)
NO_FILTERS_EXPLANATION = "No filters supplied. All tasks will match the query."


@dataclass(frozen=True)
class QueryError:
    """An instruction line that could not be understood."""

    line_number: int
    line: str
    message: str

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}: {self.line}"


class Query:
    """Filters, sorters, groupers and a limit read from query text.

    One instruction per line. Blank lines and lines starting with ``#`` are
    skipped. Parsing never raises: bad lines are collected in ``errors``.
    """

    def __init__(self, source: str, *, today: datetime.date | None = None) -> None:
        self.source = source
        self.filters: list[Filter] = []
        self.sorting: list[Sorter] = []
        self.grouping: list[Grouper] = []
        self.limit: int | None = None
        self.explain_requested = False
        self.errors: list[QueryError] = []

        for line_number, raw_line in enumerate(source.splitlines(), start=1):
            line = " ".join(raw_line.split())
            if not line or line.startswith("#"):
                continue
            self._parse_line(line_number, line, today)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def _parse_line(self, line_number: int, line: str, today: datetime.date | None) -> None:
        lowered = line.lower()
        if lowered == "explain":
            self.explain_requested = True
            return

        limit_match = _LIMIT.match(line)
        if limit_match:
            self.limit = int(limit_match.group(1))
            return

        if lowered.startswith("sort by "):
            sorter = parse_sort_by(line)
            if sorter is None:
                self._add_error(line_number, line, "do not understand query")
            else:
                self.sorting.append(sorter)
            return

        if lowered.startswith("group by "):
            grouper = parse_group_by(line)
            if grouper is None:
                self._add_error(line_number, line, "do not understand query")
            else:
                self.grouping.append(grouper)
            return

        for field in DATE_FIELDS:
            if field.can_create_filter_for_line(line):
                result = field.create_filter_or_error_message(line, today=today)
                if result.filter is not None:
                    self.filters.append(result.filter)
                else:
                    self._add_error(line_number, line, result.error or "do not understand query")
                return

        self._add_error(line_number, line, "do not understand query")

    def _add_error(self, line_number: int, line: str, message: str) -> None:
        logger.debug(
            "Query instruction not understood",
            extra={"extra_context": {"line_number": line_number, "line": line, "error": message}},
        )
        self.errors.append(QueryError(line_number, line, message))

    def matches(self, task: Task) -> bool:
        return all(query_filter.matches(task) for query_filter in self.filters)

    def apply(self, tasks: Iterable[Task]) -> TaskGroups:
        """Filter, sort, limit and group the tasks."""
        matching = [task for task in tasks if self.matches(task)]
        ordered = sort_tasks(matching, [*self.sorting, *DEFAULT_SORTERS])
        if self.limit is not None:
            ordered = ordered[: self.limit]
        return TaskGroups(self.grouping, ordered)

    def explain(self) -> str:
        """One explanation per filter, or a note that there are none."""
        if not self.filters:
            return NO_FILTERS_EXPLANATION
        return "\n".join(str(query_filter.explanation) for query_filter in self.filters)
