"""Tests for date field filters, sorters and groupers."""

from __future__ import annotations

from datetime import date

import pytest

from tasks_query.calendar_value import CalendarValue
from tasks_query.query.fields import DONE, DUE, START
from tasks_query.query.sorter import sort_tasks
from tasks_query.task import Task

BEFORE = Task(description="before", due_date=CalendarValue.of(date(2024, 1, 1)))
ON = Task(description="on", due_date=CalendarValue.of(date(2024, 1, 2)))
AFTER = Task(description="after", due_date=CalendarValue.of(date(2024, 1, 3)))
MISSING = Task(description="missing")
INVALID = Task(description="invalid", due_date=CalendarValue.invalid("2024-13-45"))
ALL_TASKS = [BEFORE, ON, AFTER, MISSING, INVALID]


def matching(field, line: str, tasks=ALL_TASKS, today=None) -> list[str]:
    result = field.create_filter_or_error_message(line, today=today)
    assert result.ok, result.error
    return [task.description for task in tasks if result.filter.matches(task)]


class TestRelationalFilters:
    """Tests for before/after/on instructions."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("due before 2024-01-02", ["before"]),
            ("due on 2024-01-02", ["on"]),
            ("due 2024-01-02", ["on"]),
            ("due after 2024-01-02", ["after"]),
            ("due date before 2024-01-02", ["before"]),
            ("DUE AFTER 2024-01-02", ["after"]),
        ],
    )
    def test_partition(self, line: str, expected: list[str]):
        """Test that before, on and after split the dated tasks."""
        assert matching(DUE, line) == expected

    def test_relative_date_uses_today(self):
        """Test a relative date in the instruction."""
        assert matching(DUE, "due before tomorrow", today=date(2024, 1, 1)) == ["before"]

    def test_missing_start_date_matches(self):
        """Test that tasks without a start date match relational filters."""
        tasks = [
            Task(description="early", start_date=CalendarValue.of(date(2024, 1, 1))),
            Task(description="late", start_date=CalendarValue.of(date(2024, 1, 5))),
            Task(description="none"),
            Task(description="bad", start_date=CalendarValue.invalid("nope")),
        ]

        assert matching(START, "start before 2024-01-02", tasks) == ["early", "none"]
        assert matching(START, "starts after 2024-01-02", tasks) == ["late", "none"]
        assert matching(START, "started before 2024-01-02", tasks) == ["early", "none"]

    def test_invalid_date_never_matches(self):
        """Test that a task with an invalid date matches no relation."""
        for line in ("due before 2030-01-01", "due after 2000-01-01", "due on 2024-01-02"):
            assert "invalid" not in matching(DUE, line)


class TestFixedFilters:
    """Tests for has/no/invalid instructions."""

    def test_has_date(self):
        assert matching(DUE, "has due date") == ["before", "on", "after", "invalid"]

    def test_no_date(self):
        assert matching(DUE, "no due date") == ["missing"]

    def test_date_is_invalid(self):
        assert matching(DUE, "due date is invalid") == ["invalid"]

    def test_extra_whitespace_and_case(self):
        """Test that fixed instructions ignore case and spacing."""
        assert matching(DUE, "  Has   Due  Date ") == ["before", "on", "after", "invalid"]


class TestExplanations:
    """Tests for filter explanations."""

    def test_before(self):
        result = DUE.create_filter_or_error_message("due before 2024-01-02")

        assert str(result.filter.explanation) == "due date is before 2024-01-02 (Tuesday 2nd January 2024)"

    def test_on_when_keyword_omitted(self):
        result = DONE.create_filter_or_error_message("done 2024-01-02")

        assert str(result.filter.explanation) == "done date is on 2024-01-02 (Tuesday 2nd January 2024)"

    def test_start_mentions_missing_dates(self):
        result = START.create_filter_or_error_message("starts after 2024-01-02")

        assert str(result.filter.explanation) == (
            "start date is after 2024-01-02 (Tuesday 2nd January 2024) OR no start date"
        )


class TestErrors:
    """Tests for instructions that cannot be understood."""

    def test_unparseable_date(self):
        """Test an instruction whose date makes no sense."""
        result = DUE.create_filter_or_error_message("due before someday")

        assert not result.ok
        assert result.error == "do not understand due date"

    def test_unrecognized_instruction(self):
        """Test a line that is not a due date instruction at all."""
        result = DUE.create_filter_or_error_message("due")

        assert result.filter is None
        assert result.error == "do not understand query filter (due date)"

    def test_can_create_filter_for_line(self):
        assert DUE.can_create_filter_for_line("due before today")
        assert DUE.can_create_filter_for_line("no due date")
        assert not DUE.can_create_filter_for_line("done before today")
        assert not DUE.can_create_filter_for_line("due")


def test_sorter_orders_missing_and_invalid_last() -> None:
    """Test dated tasks first, then invalid dates, then missing dates."""
    ordered = sort_tasks([MISSING, AFTER, INVALID, BEFORE], [DUE.create_sorter()])

    assert [task.description for task in ordered] == ["before", "after", "invalid", "missing"]


def test_sorter_reverse() -> None:
    ordered = sort_tasks([MISSING, AFTER, INVALID, BEFORE], [DUE.create_sorter(reverse=True)])

    assert [task.description for task in ordered] == ["missing", "invalid", "after", "before"]


def test_grouper_names() -> None:
    """Test group names for valid, missing and invalid dates."""
    grouper = DUE.create_grouper()

    assert grouper.group_keys(ON) == ["2024-01-02 Tuesday"]
    assert grouper.group_keys(MISSING) == ["No due date"]
    assert grouper.group_keys(INVALID) == ["Invalid due date"]


def test_date_out_of_range_gives_error_message() -> None:
    """Test a relative date beyond the supported years."""
    result = DUE.create_filter_or_error_message("due before in 99999 years", today=date(2024, 1, 1))

    assert result.filter is None
    assert result.error == "do not understand due date"
