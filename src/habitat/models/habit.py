"""Habit tables: habits, their schedule, completions and numeric logs."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel


class Habit(SQLModel, table=True):
    """A recurring tracked behaviour; soft-deleted by stamping ``archived_at``."""

    __tablename__: ClassVar[str] = "habits"

    id: str = Field(primary_key=True)
    name: str = Field(nullable=False)
    description: str = Field(default="", sa_column_kwargs={"server_default": ""})
    color: str = Field(default="#6366f1", sa_column_kwargs={"server_default": "#6366f1"})
    icon: str = Field(default="i-heroicons-star", sa_column_kwargs={"server_default": "i-heroicons-star"})
    frequency: str = Field(default="daily", sa_column_kwargs={"server_default": "daily"})
    created_at: str = Field(nullable=False)
    archived_at: Optional[str] = Field(default=None)
    # JSON text; only habitat.infra.codec reads or writes these two.
    tags: str = Field(default="[]", sa_column_kwargs={"server_default": "[]"})
    annotations: str = Field(default="{}", sa_column_kwargs={"server_default": "{}"})
    type: str = Field(default="BOOLEAN", sa_column_kwargs={"server_default": "BOOLEAN"})
    target_value: float = Field(default=1.0, sa_column_kwargs={"server_default": "1"})
    paused_until: Optional[str] = Field(default=None)


class HabitSchedule(SQLModel, table=True):
    """Recurrence descriptor, one per habit."""

    __tablename__: ClassVar[str] = "habit_schedules"
    __table_args__ = (Index("idx_schedules_habit_id", "habit_id"),)

    id: str = Field(primary_key=True)
    habit_id: str = Field(foreign_key="habits.id", ondelete="CASCADE", nullable=False)
    schedule_type: str = Field(default="DAILY", sa_column_kwargs={"server_default": "DAILY"})
    frequency_count: Optional[int] = Field(default=None)
    days_of_week: Optional[str] = Field(default=None)
    due_time: Optional[str] = Field(default=None)
    start_date: Optional[str] = Field(default=None)
    end_date: Optional[str] = Field(default=None)


class Completion(SQLModel, table=True):
    """Presence of a row marks a BOOLEAN habit done on ``date``."""

    __tablename__: ClassVar[str] = "completions"
    __table_args__ = (
        UniqueConstraint("habit_id", "date"),
        Index("idx_completions_date", "date"),
        Index("idx_completions_habit_id", "habit_id"),
    )

    id: str = Field(primary_key=True)
    habit_id: str = Field(foreign_key="habits.id", ondelete="CASCADE", nullable=False)
    date: str = Field(nullable=False)
    completed_at: str = Field(nullable=False)
    notes: str = Field(default="", sa_column_kwargs={"server_default": ""})
    tags: str = Field(default="[]", sa_column_kwargs={"server_default": "[]"})
    annotations: str = Field(default="{}", sa_column_kwargs={"server_default": "{}"})


class HabitLog(SQLModel, table=True):
    """Append-only numeric observation for NUMERIC and LIMIT habits."""

    __tablename__: ClassVar[str] = "habit_logs"
    __table_args__ = (
        Index("idx_habit_logs_date", "date"),
        Index("idx_habit_logs_habit_id", "habit_id"),
    )

    id: str = Field(primary_key=True)
    habit_id: str = Field(foreign_key="habits.id", ondelete="CASCADE", nullable=False)
    date: str = Field(nullable=False)
    logged_at: str = Field(nullable=False)
    value: float = Field(default=1.0, sa_column_kwargs={"server_default": "1"})
    notes: str = Field(default="", sa_column_kwargs={"server_default": ""})
