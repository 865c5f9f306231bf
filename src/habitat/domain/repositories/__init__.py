"""Repository protocol definitions for domain layer."""

from .bored import BoredRepository
from .checkin import CheckinRepository
from .defaults import DefaultsRepository
from .habit import HabitRepository
from .reminder import ReminderRepository
from .scribble import ScribbleRepository
from .todo import TodoRepository

__all__ = [
    "BoredRepository",
    "CheckinRepository",
    "DefaultsRepository",
    "HabitRepository",
    "ReminderRepository",
    "ScribbleRepository",
    "TodoRepository",
]
