"""Tests for parsing and applying queries."""

from __future__ import annotations

from datetime import date

import pytest

from tasks_query.calendar_value import CalendarValue
from tasks_query.query.query import NO_FILTERS_EXPLANATION, Query
from tasks_query.task import Task

LATER = Task(description="later", due_date=CalendarValue.of(date(2024, 1, 3)))
EARLY = Task(description="early", due_date=CalendarValue.of(date(2024, 1, 1)))
UNDATED = Task(description="undated")
TASKS = [LATER, EARLY, UNDATED]


def apply(source: str) -> list[str]:
    groups = Query(source).apply(TASKS)
    return [task.description for group in groups for task in group.tasks]


class TestParsing:
    """Tests for reading query text."""

    def test_blank_lines_and_comments_are_skipped(self):
        query = Query("\n# only a comment\n   \n")

        assert not query.has_errors
        assert query.filters == []

    def test_unknown_instruction(self):
        query = Query("due before 2024-01-02\nfrobnicate")

        assert query.has_errors
        assert len(query.filters) == 1
        assert str(query.errors[0]) == "Line 2: do not understand query: frobnicate"

    def test_bad_date_reports_field(self):
        query = Query("due before someday")

        assert query.errors[0].message == "do not understand due date"

    @pytest.mark.parametrize("line", ["due before in 99999 years", "due after 9999999999 days ago"])
    def test_date_out_of_range_is_an_error(self, line: str):
        query = Query(line, today=date(2024, 1, 1))

        assert query.filters == []
        assert [error.message for error in query.errors] == ["do not understand due date"]

    def test_bad_sort_and_group_lines(self):
        query = Query("sort by colour\ngroup by colour")

        assert [error.line_number for error in query.errors] == [1, 2]

    def test_limit(self):
        assert Query("limit 5").limit == 5
        assert Query("limit to 1 task").limit == 1
        assert Query("LIMIT TO 10 TASKS").limit == 10

    def test_explain(self):
        query = Query("explain\ndue before 2024-01-02\nhas due date")

        assert query.explain_requested
        assert query.explain() == (
            "due date is before 2024-01-02 (Tuesday 2nd January 2024)\nhas due date"
        )

    def test_explain_without_filters(self):
        assert Query("").explain() == NO_FILTERS_EXPLANATION

    def test_relative_dates_use_today(self):
        query = Query("due before tomorrow", today=date(2024, 1, 1))

        assert [task.description for task in TASKS if query.matches(task)] == ["early"]


class TestApply:
    """Tests for applying queries to tasks."""

    def test_default_sort(self):
        assert apply("") == ["early", "later", "undated"]

    def test_filters_combine(self):
        assert apply("has due date\ndue after 2024-01-01") == ["later"]

    def test_sort_by_reverse(self):
        assert apply("sort by description reverse") == ["undated", "later", "early"]

    def test_limit_applies_after_sorting(self):
        assert apply("limit 1") == ["early"]

    def test_group_by_due(self):
        groups = Query("group by due").apply(TASKS)

        assert [group.group_names for group in groups] == [
            ("2024-01-01 Monday",),
            ("2024-01-03 Wednesday",),
            ("No due date",),
        ]
        assert groups.total_tasks_count() == 3
