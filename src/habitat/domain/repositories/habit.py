"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, runtime_checkable

from ..inputs import HabitCreate, HabitUpdate, ScheduleUpdate
from ..records import (
    CompletionRecord,
    HabitLogRecord,
    HabitWithSchedule,
    ScheduleRecord,
    Streak,
)


@runtime_checkable
class HabitRepository(Protocol):
    """Repository for habits, schedules, completions and numeric logs."""

    def get_by_id(self, habit_id: str) -> Optional[HabitWithSchedule]:
        """Retrieve a habit by ID."""
        ...

    def list_active(self) -> list[HabitWithSchedule]:
        """List unarchived habits."""
        ...

    def list_archived(self) -> list[HabitWithSchedule]:
        """List archived habits."""
        ...

    def create(self, data: HabitCreate) -> HabitWithSchedule:
        """Create a habit together with its default schedule."""
        ...

    def update(self, data: HabitUpdate) -> HabitWithSchedule:
        """Update the fields present in ``data``."""
        ...

    def archive(self, habit_id: str) -> None:
        ...

    def delete(self, habit_id: str) -> None:
        ...

    def delete_all(self) -> None:
        ...

    def pause(self, habit_id: str, until: Optional[str]) -> HabitWithSchedule:
        ...

    def pause_all(self, until: Optional[str]) -> None:
        ...

    # Schedule operations
    def get_schedule(self, habit_id: str) -> Optional[ScheduleRecord]:
        ...

    def update_schedule(self, data: ScheduleUpdate) -> ScheduleRecord:
        ...

    # Completion operations
    def get_completions_for_date(self, day: str) -> list[CompletionRecord]:
        ...

    def get_completions_for_habit(
        self, habit_id: str, start: str, end: str
    ) -> list[CompletionRecord]:
        ...

    def get_completions_for_range(self, start: str, end: str) -> list[CompletionRecord]:
        ...

    def get_all_completions(self) -> list[CompletionRecord]:
        ...

    def toggle_completion(
        self,
        habit_id: str,
        day: str,
        *,
        tags: Optional[list[str]] = None,
        annotations: Optional[dict[str, str]] = None,
    ) -> Optional[CompletionRecord]:
        """Insert the completion, or delete it and return None."""
        ...

    # Log operations
    def get_logs_for_date(self, day: str) -> list[HabitLogRecord]:
        ...

    def get_logs_for_habit(self, habit_id: str, start: str, end: str) -> list[HabitLogRecord]:
        ...

    def get_logs_for_range(self, start: str, end: str) -> list[HabitLogRecord]:
        ...

    def log_value(self, habit_id: str, day: str, value: float, notes: str = "") -> HabitLogRecord:
        ...

    def delete_log(self, log_id: str) -> None:
        ...

    def get_streak(self, habit_id: str, *, today: date | str | None = None) -> Streak:
        """Current and longest streak for the habit."""
        ...
