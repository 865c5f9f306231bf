"""Request tags and the payload models validated for each of them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.inputs import Day


class RequestType(str, Enum):
    """Closed set of operation tags understood by the dispatcher."""

    # Habits
    GET_HABITS = "GET_HABITS"
    GET_ARCHIVED_HABITS = "GET_ARCHIVED_HABITS"
    CREATE_HABIT = "CREATE_HABIT"
    UPDATE_HABIT = "UPDATE_HABIT"
    ARCHIVE_HABIT = "ARCHIVE_HABIT"
    DELETE_HABIT = "DELETE_HABIT"
    DELETE_ALL_HABITS = "DELETE_ALL_HABITS"
    PAUSE_HABIT = "PAUSE_HABIT"
    PAUSE_ALL_HABITS = "PAUSE_ALL_HABITS"

    # Completions and streaks
    GET_COMPLETIONS_FOR_DATE = "GET_COMPLETIONS_FOR_DATE"
    GET_COMPLETIONS_FOR_HABIT = "GET_COMPLETIONS_FOR_HABIT"
    GET_COMPLETIONS_FOR_DATE_RANGE = "GET_COMPLETIONS_FOR_DATE_RANGE"
    GET_ALL_COMPLETIONS = "GET_ALL_COMPLETIONS"
    TOGGLE_COMPLETION = "TOGGLE_COMPLETION"
    GET_STREAK = "GET_STREAK"

    # Numeric logs
    GET_HABIT_LOGS_FOR_DATE = "GET_HABIT_LOGS_FOR_DATE"
    GET_HABIT_LOGS_FOR_HABIT = "GET_HABIT_LOGS_FOR_HABIT"
    GET_HABIT_LOGS_FOR_DATE_RANGE = "GET_HABIT_LOGS_FOR_DATE_RANGE"
    LOG_HABIT_VALUE = "LOG_HABIT_VALUE"
    DELETE_HABIT_LOG = "DELETE_HABIT_LOG"

    # Schedules
    GET_SCHEDULE_FOR_HABIT = "GET_SCHEDULE_FOR_HABIT"
    UPDATE_HABIT_SCHEDULE = "UPDATE_HABIT_SCHEDULE"

    # Check-ins
    GET_CHECKIN_ENTRY = "GET_CHECKIN_ENTRY"
    UPSERT_CHECKIN_ENTRY = "UPSERT_CHECKIN_ENTRY"
    DELETE_CHECKIN_ENTRY = "DELETE_CHECKIN_ENTRY"
    GET_CHECKIN_ENTRIES = "GET_CHECKIN_ENTRIES"
    DELETE_ALL_CHECKIN_ENTRIES = "DELETE_ALL_CHECKIN_ENTRIES"
    GET_CHECKIN_TEMPLATES = "GET_CHECKIN_TEMPLATES"
    GET_CHECKIN_TEMPLATE = "GET_CHECKIN_TEMPLATE"
    CREATE_CHECKIN_TEMPLATE = "CREATE_CHECKIN_TEMPLATE"
    UPDATE_CHECKIN_TEMPLATE = "UPDATE_CHECKIN_TEMPLATE"
    DELETE_CHECKIN_TEMPLATE = "DELETE_CHECKIN_TEMPLATE"
    DELETE_ALL_CHECKIN_DATA = "DELETE_ALL_CHECKIN_DATA"
    GET_CHECKIN_QUESTIONS = "GET_CHECKIN_QUESTIONS"
    CREATE_CHECKIN_QUESTION = "CREATE_CHECKIN_QUESTION"
    UPDATE_CHECKIN_QUESTION = "UPDATE_CHECKIN_QUESTION"
    DELETE_CHECKIN_QUESTION = "DELETE_CHECKIN_QUESTION"
    GET_CHECKIN_RESPONSES = "GET_CHECKIN_RESPONSES"
    UPSERT_CHECKIN_RESPONSE = "UPSERT_CHECKIN_RESPONSE"
    DELETE_CHECKIN_RESPONSE = "DELETE_CHECKIN_RESPONSE"
    GET_CHECKIN_RESPONSE_DATES = "GET_CHECKIN_RESPONSE_DATES"
    GET_CHECKIN_SUMMARY_FOR_DATE = "GET_CHECKIN_SUMMARY_FOR_DATE"

    # Scribbles
    GET_SCRIBBLES = "GET_SCRIBBLES"
    GET_SCRIBBLES_FOR_DATE = "GET_SCRIBBLES_FOR_DATE"
    CREATE_SCRIBBLE = "CREATE_SCRIBBLE"
    UPDATE_SCRIBBLE = "UPDATE_SCRIBBLE"
    DELETE_SCRIBBLE = "DELETE_SCRIBBLE"
    DELETE_ALL_SCRIBBLES = "DELETE_ALL_SCRIBBLES"

    # Reminders
    GET_ALL_REMINDERS = "GET_ALL_REMINDERS"
    GET_REMINDERS_FOR_HABIT = "GET_REMINDERS_FOR_HABIT"
    CREATE_REMINDER = "CREATE_REMINDER"
    DELETE_REMINDER = "DELETE_REMINDER"
    GET_ALL_CHECKIN_REMINDERS = "GET_ALL_CHECKIN_REMINDERS"
    GET_CHECKIN_REMINDERS_FOR_TEMPLATE = "GET_CHECKIN_REMINDERS_FOR_TEMPLATE"
    CREATE_CHECKIN_REMINDER = "CREATE_CHECKIN_REMINDER"
    DELETE_CHECKIN_REMINDER = "DELETE_CHECKIN_REMINDER"

    # Bored list
    GET_BORED_CATEGORIES = "GET_BORED_CATEGORIES"
    CREATE_BORED_CATEGORY = "CREATE_BORED_CATEGORY"
    UPDATE_BORED_CATEGORY = "UPDATE_BORED_CATEGORY"
    DELETE_BORED_CATEGORY = "DELETE_BORED_CATEGORY"
    GET_BORED_ACTIVITIES = "GET_BORED_ACTIVITIES"
    GET_BORED_ACTIVITIES_FOR_CATEGORY = "GET_BORED_ACTIVITIES_FOR_CATEGORY"
    CREATE_BORED_ACTIVITY = "CREATE_BORED_ACTIVITY"
    UPDATE_BORED_ACTIVITY = "UPDATE_BORED_ACTIVITY"
    DELETE_BORED_ACTIVITY = "DELETE_BORED_ACTIVITY"
    ARCHIVE_BORED_ACTIVITY = "ARCHIVE_BORED_ACTIVITY"
    MARK_BORED_ACTIVITY_DONE = "MARK_BORED_ACTIVITY_DONE"
    GET_BORED_ORACLE = "GET_BORED_ORACLE"
    DELETE_ALL_BORED_DATA = "DELETE_ALL_BORED_DATA"

    # Todos
    GET_TODOS = "GET_TODOS"
    CREATE_TODO = "CREATE_TODO"
    UPDATE_TODO = "UPDATE_TODO"
    DELETE_TODO = "DELETE_TODO"
    ARCHIVE_TODO = "ARCHIVE_TODO"
    TOGGLE_TODO = "TOGGLE_TODO"
    DELETE_ALL_TODOS = "DELETE_ALL_TODOS"

    # Seed ledger
    IS_DEFAULT_APPLIED = "IS_DEFAULT_APPLIED"
    MARK_DEFAULT_APPLIED = "MARK_DEFAULT_APPLIED"
    CLEAR_APPLIED_DEFAULTS = "CLEAR_APPLIED_DEFAULTS"

    # Diagnostics and snapshots
    GET_DB_INFO = "GET_DB_INFO"
    INTEGRITY_CHECK = "INTEGRITY_CHECK"
    EXPORT_JSON_DATA = "EXPORT_JSON_DATA"
    IMPORT_JSON = "IMPORT_JSON"
    EXPORT_DB = "EXPORT_DB"
    WIPE_STORAGE = "WIPE_STORAGE"


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class IdPayload(_Payload):
    id: str


class KeyPayload(_Payload):
    key: str


class DatePayload(_Payload):
    date: Day


class HabitIdPayload(_Payload):
    habit_id: str


class TemplateIdPayload(_Payload):
    template_id: str


class CategoryIdPayload(_Payload):
    category_id: str


class RangePayload(_Payload):
    """Inclusive date window; the wire key is ``from``."""

    start: Day = Field(alias="from")
    end: Day = Field(alias="to")


class HabitRangePayload(RangePayload):
    habit_id: str


class TogglePayload(_Payload):
    habit_id: str
    date: Day
    tags: Optional[list[str]] = None
    annotations: Optional[dict[str, str]] = None


class LogValuePayload(_Payload):
    habit_id: str
    date: Day
    value: float
    notes: Optional[str] = None


class PausePayload(_Payload):
    id: str
    until: Optional[Day] = None


class PauseAllPayload(_Payload):
    until: Optional[Day] = None


class EntryUpsertPayload(_Payload):
    date: Day
    content: str = ""


class ResponsesQueryPayload(_Payload):
    template_id: str
    date: Day


class ResponseUpsertPayload(_Payload):
    question_id: str
    logged_date: Day
    value_numeric: Optional[float] = None
    value_text: Optional[str] = None


class OraclePayload(_Payload):
    excluded_category_ids: list[str] = Field(default_factory=list)
    max_minutes: Optional[int] = None


class Request(_Payload):
    """Wire request; ``id`` is the caller's correlation id."""

    id: str
    type: str
    payload: Any = None
