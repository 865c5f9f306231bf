"""Repository implementations."""

from .bored import SQLModelBoredRepository
from .checkin import SQLModelCheckinRepository
from .defaults import SQLModelDefaultsRepository
from .habit import SQLModelHabitRepository
from .reminder import SQLModelReminderRepository
from .scribble import SQLModelScribbleRepository
from .todo import SQLModelTodoRepository

__all__ = [
    "SQLModelBoredRepository",
    "SQLModelCheckinRepository",
    "SQLModelDefaultsRepository",
    "SQLModelHabitRepository",
    "SQLModelReminderRepository",
    "SQLModelScribbleRepository",
    "SQLModelTodoRepository",
]
