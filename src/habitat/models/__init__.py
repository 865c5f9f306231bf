"""SQLModel table exports."""

from .bored import BoredActivity, BoredCategory
from .checkin import CheckinEntry, CheckinQuestion, CheckinResponse, CheckinTemplate
from .habit import Completion, Habit, HabitLog, HabitSchedule
from .reminder import CheckinReminder, Reminder
from .scribble import Scribble
from .settings import AppliedDefault
from .todo import Todo

__all__ = [
    "AppliedDefault",
    "BoredActivity",
    "BoredCategory",
    "CheckinEntry",
    "CheckinQuestion",
    "CheckinReminder",
    "CheckinResponse",
    "CheckinTemplate",
    "Completion",
    "Habit",
    "HabitLog",
    "HabitSchedule",
    "Reminder",
    "Scribble",
    "Todo",
]
