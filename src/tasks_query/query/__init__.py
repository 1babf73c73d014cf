"""Query instructions: date filters, sorters, groupers and task groups."""

from __future__ import annotations

from .date_field import DateField
from .date_parser import parse_date
from .fields import CREATED, DATE_FIELDS, DONE, DUE, SCHEDULED, START, parse_group_by, parse_sort_by
from .filter import Explanation, Filter, FilterOrErrorMessage
from .grouper import Grouper
from .query import Query, QueryError
from .sorter import Sorter, sort_tasks
from .task_groups import GroupDisplayHeading, TaskGroup, TaskGroups

__all__ = [
    "CREATED",
    "DATE_FIELDS",
    "DONE",
    "DUE",
    "DateField",
    "Explanation",
    "Filter",
    "FilterOrErrorMessage",
    "GroupDisplayHeading",
    "Grouper",
    "Query",
    "QueryError",
    "SCHEDULED",
    "START",
    "Sorter",
    "TaskGroup",
    "TaskGroups",
    "parse_date",
    "parse_group_by",
    "parse_sort_by",
    "sort_tasks",
]
