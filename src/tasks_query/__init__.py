"""Parse annotated markdown task lines and evaluate queries over them."""

from __future__ import annotations

from .calendar_value import CalendarValue
from .config import Config, TimeFormat, load_config
from .reminders import Reminder, ReminderList, ReminderType
from .serializer import DEFAULT_SYMBOLS, DefaultTaskSerializer
from .task import Priority, Task

__all__ = [
    "CalendarValue",
    "Config",
    "DEFAULT_SYMBOLS",
    "DefaultTaskSerializer",
    "Priority",
    "Reminder",
    "ReminderList",
    "ReminderType",
    "Task",
    "TimeFormat",
    "load_config",
]
