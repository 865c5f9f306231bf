"""Whole-database JSON snapshot export and all-or-nothing import.

Only version 1 bundles exist. Import runs in a single transaction with
``INSERT ... ON CONFLICT DO NOTHING``, so re-importing the same file is
harmless and existing rows are never overwritten.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Field, Session, SQLModel, select

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
    ReminderRecord,
    ScheduleRecord,
    ScribbleRecord,
    TodoRecord,
)
from ..errors import UnsupportedSnapshotVersionError
from ..infra import codec
from ..infra.clock import utc_now
from ..infra.database import SessionFactory
from ..logging_config import get_logger
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

logger = get_logger("snapshot")

SNAPSHOT_VERSION = 1


class ExportSelection(SQLModel):
    """Which families to export; anything not switched on is skipped."""

    habits: bool = False
    completions: bool = False
    habit_logs: bool = False
    habit_schedules: bool = False
    reminders: bool = False
    checkin_templates: bool = False
    checkin_questions: bool = False
    checkin_responses: bool = False
    checkin_reminders: bool = False
    scribbles: bool = False
    checkin_entries: bool = False
    bored_categories: bool = False
    bored_activities: bool = False
    todos: bool = False

    @classmethod
    def everything(cls) -> "ExportSelection":
        return cls(**{name: True for name in FAMILIES})


class SnapshotBundle(SQLModel):
    version: int = SNAPSHOT_VERSION
    exported_at: Optional[str] = None
    habits: list[HabitRecord] = Field(default_factory=list)
    completions: list[CompletionRecord] = Field(default_factory=list)
    habit_logs: list[HabitLogRecord] = Field(default_factory=list)
    habit_schedules: list[ScheduleRecord] = Field(default_factory=list)
    reminders: list[ReminderRecord] = Field(default_factory=list)
    checkin_templates: list[CheckinTemplateRecord] = Field(default_factory=list)
    checkin_questions: list[CheckinQuestionRecord] = Field(default_factory=list)
    checkin_responses: list[CheckinResponseRecord] = Field(default_factory=list)
    checkin_reminders: list[CheckinReminderRecord] = Field(default_factory=list)
    scribbles: list[ScribbleRecord] = Field(default_factory=list)
    checkin_entries: list[CheckinEntryRecord] = Field(default_factory=list)
    bored_categories: list[BoredCategoryRecord] = Field(default_factory=list)
    bored_activities: list[BoredActivityRecord] = Field(default_factory=list)
    todos: list[TodoRecord] = Field(default_factory=list)


# family -> (table, ordering, row reader, row writer)
_Family = tuple[type[SQLModel], Sequence[Any], Callable[[Any], Any], Callable[[Any], dict[str, Any]]]

_FAMILIES: dict[str, _Family] = {
    "habits": (Habit, (Habit.created_at,), codec.row_to_habit, codec.habit_to_row),
    "completions": (
        Completion,
        (Completion.date.desc(),),  # type: ignore[attr-defined]
        codec.row_to_completion,
        codec.completion_to_row,
    ),
    "habit_logs": (HabitLog, (HabitLog.logged_at,), codec.row_to_habit_log, codec.plain_row),
    "habit_schedules": (HabitSchedule, (), codec.row_to_schedule, codec.schedule_to_row),
    "reminders": (Reminder, (Reminder.trigger_time,), codec.row_to_reminder, codec.reminder_to_row),
    "checkin_templates": (
        CheckinTemplate,
        (CheckinTemplate.title,),
        codec.row_to_checkin_template,
        codec.checkin_template_to_row,
    ),
    "checkin_questions": (
        CheckinQuestion,
        (CheckinQuestion.template_id, CheckinQuestion.display_order),
        codec.row_to_checkin_question,
        codec.plain_row,
    ),
    "checkin_responses": (
        CheckinResponse,
        (CheckinResponse.logged_date,),
        codec.row_to_checkin_response,
        codec.plain_row,
    ),
    "checkin_reminders": (
        CheckinReminder,
        (CheckinReminder.trigger_time,),
        codec.row_to_checkin_reminder,
        codec.reminder_to_row,
    ),
    "scribbles": (
        Scribble,
        (Scribble.updated_at.desc(),),  # type: ignore[attr-defined]
        codec.row_to_scribble,
        codec.scribble_to_row,
    ),
    "checkin_entries": (
        CheckinEntry,
        (CheckinEntry.entry_date,),
        codec.row_to_checkin_entry,
        codec.plain_row,
    ),
    "bored_categories": (
        BoredCategory,
        (BoredCategory.sort_order,),
        codec.row_to_bored_category,
        codec.bored_category_to_row,
    ),
    "bored_activities": (
        BoredActivity,
        (BoredActivity.created_at,),
        codec.row_to_bored_activity,
        codec.bored_activity_to_row,
    ),
    "todos": (Todo, (Todo.created_at,), codec.row_to_todo, codec.todo_to_row),
}

FAMILIES: tuple[str, ...] = tuple(_FAMILIES)

# Parents precede children inside each group.
IMPORT_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("habits", ("habits", "completions", "habit_logs", "habit_schedules", "reminders")),
    (
        "checkins",
        ("checkin_templates", "checkin_questions", "checkin_responses", "checkin_reminders"),
    ),
    ("other", ("scribbles", "checkin_entries", "bored_categories", "bored_activities", "todos")),
)


def export_snapshot(
    session_factory: SessionFactory,
    selection: ExportSelection | Mapping[str, bool] | None = None,
) -> SnapshotBundle:
    """Read each selected family into a version 1 bundle.

    Families are read independently; selecting children without their
    parents is allowed and produces a bundle that may not import cleanly.
    """

    if selection is None:
        selection = ExportSelection.everything()
    elif not isinstance(selection, ExportSelection):
        selection = ExportSelection.model_validate(dict(selection))

    data: dict[str, list[Any]] = {}
    with session_factory() as session:
        for family, (table, ordering, reader, _writer) in _FAMILIES.items():
            if not getattr(selection, family):
                continue
            rows = session.exec(select(table).order_by(*ordering)).all()
            data[family] = [reader(row) for row in rows]

    bundle = SnapshotBundle(exported_at=utc_now(), **data)
    logger.info(
        "Exported snapshot",
        extra={"families": {family: len(rows) for family, rows in data.items()}},
    )
    return bundle


def _check_version(bundle: Any) -> None:
    version = bundle.get("version") if isinstance(bundle, Mapping) else getattr(bundle, "version", None)
    if version != SNAPSHOT_VERSION or isinstance(version, bool):
        raise UnsupportedSnapshotVersionError(version)


def _insert_family(session: Session, family: str, records: Sequence[Any]) -> int:
    if not records:
        return 0
    table, _ordering, _reader, writer = _FAMILIES[family]
    rows = [writer(record) for record in records]
    result = session.connection().execute(
        sqlite_insert(table).on_conflict_do_nothing(), rows
    )
    return max(result.rowcount, 0)


def import_snapshot(
    session_factory: SessionFactory, bundle: SnapshotBundle | Mapping[str, Any]
) -> None:
    """Load a version 1 bundle atomically.

    Raises :class:`UnsupportedSnapshotVersionError` for any other version and
    ``pydantic.ValidationError`` for a malformed bundle, both before anything
    is written. A constraint failure part-way rolls back every group.
    """

    _check_version(bundle)
    if not isinstance(bundle, SnapshotBundle):
        bundle = SnapshotBundle.model_validate(dict(bundle))

    inserted: dict[str, int] = {}
    with session_factory() as session:
        for group, families in IMPORT_GROUPS:
            for family in families:
                inserted[family] = _insert_family(session, family, getattr(bundle, family))
            logger.debug("Imported snapshot group %s", group)
    logger.info("Imported snapshot", extra={"inserted": inserted})
