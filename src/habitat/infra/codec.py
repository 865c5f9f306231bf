"""Conversion between stored rows and domain records.

Rows keep array/map fields as JSON text and flags as 0/1 integers. Every
``row_to_*`` function here is pure and total: a malformed JSON column degrades
to the field's default (empty list, empty map or None) and logs a warning, so a
single damaged row never makes a whole query unreadable.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from ..domain.records import (
    BoredActivityRecord,
    BoredCategoryRecord,
    CheckinEntryRecord,
    CheckinQuestionRecord,
    CheckinReminderRecord,
    CheckinResponseRecord,
    CheckinTemplateRecord,
    CompletionRecord,
    HabitLogRecord,
    HabitRecord,
    HabitWithSchedule,
    ReminderRecord,
    ScheduleRecord,
    ScribbleRecord,
    TodoRecord,
)
from ..models import (
    BoredActivity,
    BoredCategory,
    CheckinEntry,
    CheckinQuestion,
    CheckinReminder,
    CheckinResponse,
    CheckinTemplate,
    Completion,
    Habit,
    HabitLog,
    HabitSchedule,
    Reminder,
    Scribble,
    Todo,
)
from ..logging_config import get_logger

logger = get_logger("codec")

_MISSING = object()


def safe_json_loads(text: Optional[str], default: Any, *, column: str = "") -> Any:
    """Parse a JSON column, returning ``default`` on NULL or on any parse failure."""

    if text is None:
        return default
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        logger.warning("Malformed JSON in column %s: %r", column or "?", text)
        return default


def _json_list(text: Optional[str], column: str) -> list[str]:
    value = safe_json_loads(text, _MISSING, column=column)
    if value is _MISSING:
        return []
    if not isinstance(value, list):
        logger.warning("Expected a JSON array in column %s: %r", column, text)
        return []
    return [str(item) for item in value]


def _json_map(text: Optional[str], column: str) -> dict[str, str]:
    value = safe_json_loads(text, _MISSING, column=column)
    if value is _MISSING:
        return {}
    if not isinstance(value, dict):
        logger.warning("Expected a JSON object in column %s: %r", column, text)
        return {}
    return {str(key): str(item) for key, item in value.items()}


def _json_days(text: Optional[str], column: str) -> Optional[list[int]]:
    value = safe_json_loads(text, None, column=column)
    if value is None:
        return None
    if not isinstance(value, list) or not all(
        isinstance(day, int) and not isinstance(day, bool) for day in value
    ):
        logger.warning("Expected a JSON integer array in column %s: %r", column, text)
        return None
    return value


# Write side


def dump_json_list(values: Optional[list[str]]) -> str:
    return json.dumps(list(values or []))


def dump_json_map(values: Optional[dict[str, str]]) -> str:
    return json.dumps(dict(values or {}))


def dump_optional_json(values: Optional[list[int]]) -> Optional[str]:
    """Serialise a day-of-week list; None stays NULL ("every day")."""

    if values is None:
        return None
    return json.dumps(list(values))


def dump_flag(value: Optional[bool]) -> int:
    return 1 if value else 0


# Read side


def row_to_habit(row: Habit) -> HabitRecord:
    return HabitRecord(
        id=row.id,
        name=row.name,
        description=row.description or "",
        color=row.color,
        icon=row.icon,
        frequency=row.frequency,
        created_at=row.created_at,
        archived_at=row.archived_at,
        tags=_json_list(row.tags, "habits.tags"),
        annotations=_json_map(row.annotations, "habits.annotations"),
        type=row.type or "BOOLEAN",
        target_value=row.target_value if row.target_value is not None else 1.0,
        paused_until=row.paused_until,
    )


def row_to_schedule(row: HabitSchedule) -> ScheduleRecord:
    return ScheduleRecord(
        id=row.id,
        habit_id=row.habit_id,
        schedule_type=row.schedule_type or "DAILY",
        frequency_count=row.frequency_count,
        days_of_week=_json_days(row.days_of_week, "habit_schedules.days_of_week"),
        due_time=row.due_time,
        start_date=row.start_date,
        end_date=row.end_date,
    )


def row_to_habit_with_schedule(
    row: Habit, schedule: Optional[HabitSchedule]
) -> HabitWithSchedule:
    habit = row_to_habit(row)
    return HabitWithSchedule(
        **habit.model_dump(),
        schedule=row_to_schedule(schedule) if schedule is not None else None,
    )


def row_to_completion(row: Completion) -> CompletionRecord:
    return CompletionRecord(
        id=row.id,
        habit_id=row.habit_id,
        date=row.date,
        completed_at=row.completed_at,
        notes=row.notes or "",
        tags=_json_list(row.tags, "completions.tags"),
        annotations=_json_map(row.annotations, "completions.annotations"),
    )


def row_to_habit_log(row: HabitLog) -> HabitLogRecord:
    return HabitLogRecord(
        id=row.id,
        habit_id=row.habit_id,
        date=row.date,
        logged_at=row.logged_at,
        value=row.value,
        notes=row.notes or "",
    )


def row_to_reminder(row: Reminder) -> ReminderRecord:
    return ReminderRecord(
        id=row.id,
        habit_id=row.habit_id,
        trigger_time=row.trigger_time,
        days_active=_json_days(row.days_active, "reminders.days_active"),
    )


def row_to_checkin_template(row: CheckinTemplate) -> CheckinTemplateRecord:
    return CheckinTemplateRecord(
        id=row.id,
        title=row.title,
        schedule_type=row.schedule_type or "DAILY",
        days_active=_json_days(row.days_active, "checkin_templates.days_active"),
    )


def row_to_checkin_question(row: CheckinQuestion) -> CheckinQuestionRecord:
    return CheckinQuestionRecord(
        id=row.id,
        template_id=row.template_id,
        prompt=row.prompt,
        response_type=row.response_type or "TEXT",
        display_order=row.display_order or 0,
    )


def row_to_checkin_response(row: CheckinResponse) -> CheckinResponseRecord:
    return CheckinResponseRecord(
        id=row.id,
        question_id=row.question_id,
        logged_date=row.logged_date,
        value_numeric=row.value_numeric,
        value_text=row.value_text,
    )


def row_to_checkin_reminder(row: CheckinReminder) -> CheckinReminderRecord:
    return CheckinReminderRecord(
        id=row.id,
        template_id=row.template_id,
        trigger_time=row.trigger_time,
        days_active=_json_days(row.days_active, "checkin_reminders.days_active"),
    )


def row_to_checkin_entry(row: CheckinEntry) -> CheckinEntryRecord:
    return CheckinEntryRecord(
        id=row.id,
        entry_date=row.entry_date,
        content=row.content or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def row_to_scribble(row: Scribble) -> ScribbleRecord:
    return ScribbleRecord(
        id=row.id,
        title=row.title or "",
        content=row.content or "",
        tags=_json_list(row.tags, "scribbles.tags"),
        annotations=_json_map(row.annotations, "scribbles.annotations"),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def row_to_bored_category(row: BoredCategory) -> BoredCategoryRecord:
    return BoredCategoryRecord(
        id=row.id,
        name=row.name,
        icon=row.icon,
        color=row.color,
        is_system=bool(row.is_system),
        sort_order=row.sort_order or 0,
        created_at=row.created_at,
    )


def row_to_bored_activity(row: BoredActivity) -> BoredActivityRecord:
    return BoredActivityRecord(
        id=row.id,
        title=row.title,
        description=row.description or "",
        category_id=row.category_id,
        estimated_minutes=row.estimated_minutes,
        tags=_json_list(row.tags, "bored_activities.tags"),
        annotations=_json_map(row.annotations, "bored_activities.annotations"),
        is_recurring=bool(row.is_recurring),
        recurrence_rule=row.recurrence_rule,
        is_done=bool(row.is_done),
        done_at=row.done_at,
        done_count=row.done_count or 0,
        last_done_at=row.last_done_at,
        archived_at=row.archived_at,
        created_at=row.created_at,
    )


def row_to_todo(row: Todo) -> TodoRecord:
    return TodoRecord(
        id=row.id,
        title=row.title,
        description=row.description or "",
        due_date=row.due_date,
        priority=row.priority or "medium",
        estimated_minutes=row.estimated_minutes,
        is_done=bool(row.is_done),
        done_at=row.done_at,
        done_count=row.done_count or 0,
        last_done_at=row.last_done_at,
        tags=_json_list(row.tags, "todos.tags"),
        annotations=_json_map(row.annotations, "todos.annotations"),
        is_recurring=bool(row.is_recurring),
        recurrence_rule=row.recurrence_rule,
        show_in_bored=bool(row.show_in_bored),
        bored_category_id=row.bored_category_id,
        archived_at=row.archived_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# Record -> row, used by snapshot import. Ids are preserved.


def habit_to_row(record: HabitRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "description": record.description,
        "color": record.color,
        "icon": record.icon,
        "frequency": record.frequency,
        "created_at": record.created_at,
        "archived_at": record.archived_at,
        "tags": dump_json_list(record.tags),
        "annotations": dump_json_map(record.annotations),
        "type": record.type,
        "target_value": record.target_value,
        "paused_until": record.paused_until,
    }


def schedule_to_row(record: ScheduleRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["days_of_week"] = dump_optional_json(record.days_of_week)
    return row


def completion_to_row(record: CompletionRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["tags"] = dump_json_list(record.tags)
    row["annotations"] = dump_json_map(record.annotations)
    return row


def reminder_to_row(record: ReminderRecord | CheckinReminderRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["days_active"] = dump_optional_json(record.days_active)
    return row


def checkin_template_to_row(record: CheckinTemplateRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["days_active"] = dump_optional_json(record.days_active)
    return row


def scribble_to_row(record: ScribbleRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["tags"] = dump_json_list(record.tags)
    row["annotations"] = dump_json_map(record.annotations)
    return row


def bored_category_to_row(record: BoredCategoryRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["is_system"] = dump_flag(record.is_system)
    return row


def bored_activity_to_row(record: BoredActivityRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["tags"] = dump_json_list(record.tags)
    row["annotations"] = dump_json_map(record.annotations)
    row["is_recurring"] = dump_flag(record.is_recurring)
    row["is_done"] = dump_flag(record.is_done)
    return row


def todo_to_row(record: TodoRecord) -> dict[str, Any]:
    row = record.model_dump()
    row["tags"] = dump_json_list(record.tags)
    row["annotations"] = dump_json_map(record.annotations)
    for flag in ("is_done", "is_recurring", "show_in_bored"):
        row[flag] = dump_flag(getattr(record, flag))
    return row


def plain_row(record) -> dict[str, Any]:
    """Rows whose columns map 1:1 onto record fields (logs, questions, responses, entries)."""

    return record.model_dump()


_JSON_LIST_FIELDS = frozenset({"tags"})
_JSON_MAP_FIELDS = frozenset({"annotations"})
_DAY_LIST_FIELDS = frozenset({"days_active", "days_of_week"})
_FLAG_FIELDS = frozenset({"is_system", "is_recurring", "is_done", "show_in_bored"})


def apply_changes(row, changes: dict[str, Any], *, nullable: frozenset[str] = frozenset()) -> None:
    """Copy a partial update onto a table row, serialising structured fields.

    ``None`` clears a column only when it is listed in ``nullable``; for
    NOT NULL columns it is ignored rather than turned into a constraint error.
    Structured fields accept None as "reset to empty".
    """

    for key, value in changes.items():
        if key in _JSON_LIST_FIELDS:
            setattr(row, key, dump_json_list(value))
        elif key in _JSON_MAP_FIELDS:
            setattr(row, key, dump_json_map(value))
        elif key in _DAY_LIST_FIELDS:
            setattr(row, key, dump_optional_json(value))
        elif key in _FLAG_FIELDS:
            setattr(row, key, dump_flag(value))
        elif value is None and key not in nullable:
            continue
        else:
            setattr(row, key, value)
