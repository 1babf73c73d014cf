"""Exceptions raised outside the parsing and query core.

Parsing and filtering never raise; they report problems through result
objects. These exceptions cover loading configuration and reading files.
"""


class TasksQueryError(Exception):
    """Base exception for all tasks-query errors."""


class ConfigError(TasksQueryError):
    """Raised when configuration is invalid or cannot be loaded."""


class TaskFileError(TasksQueryError):
    """Raised when a task file cannot be read."""
