"""Structured domain records returned by repositories and carried in snapshots.

These are plain (non-table) SQLModel models. Array and map fields are native
Python containers here; only :mod:`habitat.infra.codec` converts them to and
from the JSON text stored in SQLite.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from sqlmodel import Field, SQLModel

from .inputs import Day


class HabitRecord(SQLModel):
    id: str
    name: str
    description: str = ""
    color: str = "#6366f1"
    icon: str = "i-heroicons-star"
    frequency: str = "daily"
    created_at: str
    archived_at: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    type: str = "BOOLEAN"
    target_value: float = 1.0
    paused_until: Optional[Day] = None


class ScheduleRecord(SQLModel):
    id: str
    habit_id: str
    schedule_type: str = "DAILY"
    frequency_count: Optional[int] = None
    days_of_week: Optional[list[int]] = None
    due_time: Optional[str] = None
    start_date: Optional[Day] = None
    end_date: Optional[Day] = None


class HabitWithSchedule(HabitRecord):
    """Habit joined with its schedule; ``schedule`` is None for legacy rows without one."""

    schedule: Optional[ScheduleRecord] = None


class CompletionRecord(SQLModel):
    id: str
    habit_id: str
    date: Day
    completed_at: str
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)


class HabitLogRecord(SQLModel):
    id: str
    habit_id: str
    date: Day
    logged_at: str
    value: float
    notes: str = ""


class ReminderRecord(SQLModel):
    id: str
    habit_id: str
    trigger_time: str
    days_active: Optional[list[int]] = None


class CheckinTemplateRecord(SQLModel):
    id: str
    title: str
    schedule_type: str = "DAILY"
    days_active: Optional[list[int]] = None


class CheckinQuestionRecord(SQLModel):
    id: str
    template_id: str
    prompt: str
    response_type: str = "TEXT"
    display_order: int = 0


class CheckinResponseRecord(SQLModel):
    id: str
    question_id: str
    logged_date: Day
    value_numeric: Optional[float] = None
    value_text: Optional[str] = None


class CheckinReminderRecord(SQLModel):
    id: str
    template_id: str
    trigger_time: str
    days_active: Optional[list[int]] = None


class CheckinEntryRecord(SQLModel):
    id: str
    entry_date: Day
    content: str = ""
    created_at: str
    updated_at: str


class ScribbleRecord(SQLModel):
    id: str
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    created_at: str
    updated_at: str


class BoredCategoryRecord(SQLModel):
    id: str
    name: str
    icon: str = "i-heroicons-sparkles"
    color: str = "#6366f1"
    is_system: bool = False
    sort_order: int = 0
    created_at: str


class BoredActivityRecord(SQLModel):
    id: str
    title: str
    description: str = ""
    category_id: str
    estimated_minutes: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    is_recurring: bool = False
    recurrence_rule: Optional[str] = None
    is_done: bool = False
    done_at: Optional[str] = None
    done_count: int = 0
    last_done_at: Optional[str] = None
    archived_at: Optional[str] = None
    created_at: str


class TodoRecord(SQLModel):
    id: str
    title: str
    description: str = ""
    due_date: Optional[Day] = None
    priority: str = "medium"
    estimated_minutes: Optional[int] = None
    is_done: bool = False
    done_at: Optional[str] = None
    done_count: int = 0
    last_done_at: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    is_recurring: bool = False
    recurrence_rule: Optional[str] = None
    show_in_bored: bool = False
    bored_category_id: Optional[str] = None
    archived_at: Optional[str] = None
    created_at: str
    updated_at: str


class ActivitySuggestion(SQLModel):
    source: Literal["activity"] = "activity"
    activity: BoredActivityRecord
    category: BoredCategoryRecord


class TodoSuggestion(SQLModel):
    source: Literal["todo"] = "todo"
    todo: TodoRecord
    category: Optional[BoredCategoryRecord] = None


OracleResult = Union[ActivitySuggestion, TodoSuggestion]


class Streak(SQLModel):
    current: int = 0
    longest: int = 0


class CheckinDaySummary(SQLModel):
    template_id: str
    title: str
    response_count: int


class ResponseDateCount(SQLModel):
    date: str
    count: int


class TableInfo(SQLModel):
    name: str
    sql: str


class IndexInfo(SQLModel):
    name: str
    tbl_name: str
    sql: str


class DbInfo(SQLModel):
    user_version: int
    tables: list[TableInfo] = Field(default_factory=list)
    indices: list[IndexInfo] = Field(default_factory=list)


__all__ = [
    "ActivitySuggestion",
    "BoredActivityRecord",
    "BoredCategoryRecord",
    "CheckinDaySummary",
    "CheckinEntryRecord",
    "CheckinQuestionRecord",
    "CheckinReminderRecord",
    "CheckinResponseRecord",
    "CheckinTemplateRecord",
    "CompletionRecord",
    "DbInfo",
    "HabitLogRecord",
    "HabitRecord",
    "HabitWithSchedule",
    "IndexInfo",
    "OracleResult",
    "ReminderRecord",
    "ResponseDateCount",
    "ScheduleRecord",
    "ScribbleRecord",
    "Streak",
    "TableInfo",
    "TodoRecord",
    "TodoSuggestion",
]
