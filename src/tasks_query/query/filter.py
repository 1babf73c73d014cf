"""Filters built from query instructions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..task import Task

Predicate = Callable[[Task], bool]


@dataclass(frozen=True)
class Explanation:
    """Human-readable description of what a filter matches."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Filter:
    """A predicate over tasks, built from one instruction line."""

    instruction: str
    predicate: Predicate
    explanation: Explanation

    def matches(self, task: Task) -> bool:
        return self.predicate(task)


@dataclass(frozen=True)
class FilterOrErrorMessage:
    """Result of parsing one instruction: a filter, or an error message."""

    instruction: str
    filter: Filter | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.filter is not None

    @classmethod
    def from_filter(cls, instruction: str, predicate: Predicate, explanation: str) -> FilterOrErrorMessage:
        return cls(instruction, filter=Filter(instruction, predicate, Explanation(explanation)))

    @classmethod
    def from_error(cls, instruction: str, error: str) -> FilterOrErrorMessage:
        return cls(instruction, error=error)


class FilterInstructions:
    """Fixed-text instructions, such as ``has due date``."""

    def __init__(self) -> None:
        self._instructions: dict[str, Predicate] = {}

    def add(self, instruction: str, predicate: Predicate) -> None:
        self._instructions[_normalize(instruction)] = predicate

    def can_create_filter_for_line(self, line: str) -> bool:
        return _normalize(line) in self._instructions

    def create_filter_or_error_message(self, line: str) -> FilterOrErrorMessage:
        predicate = self._instructions.get(_normalize(line))
        if predicate is None:
            return FilterOrErrorMessage.from_error(line, "do not understand query")
        return FilterOrErrorMessage.from_filter(line, predicate, line.strip())


def _normalize(line: str) -> str:
    return " ".join(line.lower().split())
