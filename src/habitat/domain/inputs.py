"""Validated create/update inputs for repository mutations.

Update inputs are partial: only the keys the caller actually sent are applied,
which repositories read with ``model_dump(exclude_unset=True)``.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, field_validator
from sqlmodel import Field, SQLModel

HabitType = Literal["BOOLEAN", "NUMERIC", "LIMIT"]
HabitScheduleType = Literal["DAILY", "WEEKLY_FLEX", "SPECIFIC_DAYS"]
CheckinScheduleType = Literal["DAILY", "WEEKLY", "MONTHLY"]
ResponseType = Literal["SCALE", "TEXT", "BOOLEAN"]
RecurrenceRule = Literal["daily", "weekly", "monthly"]
Priority = Literal["high", "medium", "low"]

_TRIGGER_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_trigger_time(value: str) -> str:
    if not _TRIGGER_TIME_RE.match(value):
        raise ValueError(f"trigger_time must be HH:MM, got {value!r}")
    return value


def check_date(value: Optional[str]) -> Optional[str]:
    """Accept only zero-padded calendar days so stored dates compare lexically."""
    if value is None:
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{value!r} is not a calendar day") from None
    return value


# Zero-padded YYYY-MM-DD calendar day.
Day = Annotated[str, AfterValidator(check_date)]


class HabitCreate(SQLModel):
    name: str = Field(min_length=1)
    description: str = ""
    color: str = "#6366f1"
    icon: str = "i-heroicons-star"
    frequency: str = "daily"
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    type: HabitType = "BOOLEAN"
    target_value: float = 1.0
    paused_until: Optional[str] = None

    @field_validator("paused_until")
    @classmethod
    def valid_paused_until(cls, value: Optional[str]) -> Optional[str]:
        return check_date(value)


class HabitUpdate(SQLModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    frequency: Optional[str] = None
    tags: Optional[list[str]] = None
    annotations: Optional[dict[str, str]] = None
    type: Optional[HabitType] = None
    target_value: Optional[float] = None
    paused_until: Optional[str] = None

    @field_validator("paused_until")
    @classmethod
    def valid_paused_until(cls, value: Optional[str]) -> Optional[str]:
        return check_date(value)


class ScheduleUpdate(SQLModel):
    id: str
    schedule_type: Optional[HabitScheduleType] = None
    frequency_count: Optional[int] = None
    days_of_week: Optional[list[int]] = None
    due_time: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def valid_bounds(cls, value: Optional[str]) -> Optional[str]:
        return check_date(value)


class CheckinTemplateCreate(SQLModel):
    title: str = Field(min_length=1)
    schedule_type: CheckinScheduleType = "DAILY"
    days_active: Optional[list[int]] = None


class CheckinTemplateUpdate(SQLModel):
    id: str
    title: Optional[str] = None
    schedule_type: Optional[CheckinScheduleType] = None
    days_active: Optional[list[int]] = None


class CheckinQuestionCreate(SQLModel):
    template_id: str
    prompt: str
    response_type: ResponseType = "TEXT"
    display_order: int = 0


class CheckinQuestionUpdate(SQLModel):
    id: str
    prompt: Optional[str] = None
    response_type: Optional[ResponseType] = None
    display_order: Optional[int] = None


class ScribbleCreate(SQLModel):
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)


class ScribbleUpdate(SQLModel):
    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[list[str]] = None
    annotations: Optional[dict[str, str]] = None


class ReminderCreate(SQLModel):
    habit_id: str
    trigger_time: str
    days_active: Optional[list[int]] = None

    @field_validator("trigger_time")
    @classmethod
    def valid_trigger_time(cls, value: str) -> str:
        return _check_trigger_time(value)


class CheckinReminderCreate(SQLModel):
    template_id: str
    trigger_time: str
    days_active: Optional[list[int]] = None

    @field_validator("trigger_time")
    @classmethod
    def valid_trigger_time(cls, value: str) -> str:
        return _check_trigger_time(value)


class BoredCategoryCreate(SQLModel):
    name: str = Field(min_length=1)
    icon: str = "i-heroicons-sparkles"
    color: str = "#6366f1"
    is_system: bool = False
    sort_order: int = 0


class BoredCategoryUpdate(SQLModel):
    id: str
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: Optional[int] = None


class BoredActivityCreate(SQLModel):
    title: str = Field(min_length=1)
    description: str = ""
    category_id: str
    estimated_minutes: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None


class BoredActivityUpdate(SQLModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    estimated_minutes: Optional[int] = None
    tags: Optional[list[str]] = None
    annotations: Optional[dict[str, str]] = None
    is_recurring: Optional[bool] = None
    recurrence_rule: Optional[RecurrenceRule] = None


class TodoCreate(SQLModel):
    title: str = Field(min_length=1)
    description: str = ""
    due_date: Optional[str] = None
    priority: Priority = "medium"
    estimated_minutes: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    is_recurring: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    show_in_bored: bool = False
    bored_category_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def valid_due_date(cls, value: Optional[str]) -> Optional[str]:
        return check_date(value)


class TodoUpdate(SQLModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None
    estimated_minutes: Optional[int] = None
    tags: Optional[list[str]] = None
    annotations: Optional[dict[str, str]] = None
    is_recurring: Optional[bool] = None
    recurrence_rule: Optional[RecurrenceRule] = None
    show_in_bored: Optional[bool] = None
    bored_category_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def valid_due_date(cls, value: Optional[str]) -> Optional[str]:
        return check_date(value)
