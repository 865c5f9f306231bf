"""Routing table from request tag to repository call, plus the response envelope."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..domain import inputs
from ..errors import HabitatError, UnsupportedOperationError
from ..logging_config import get_logger
from ..services.snapshot import ExportSelection
from ..store import HabitatStore
from . import requests as rq
from .requests import RequestType

logger = get_logger("dispatch")

Handler = Callable[[HabitatStore, Any], Any]

_ROUTES: dict[RequestType, tuple[Optional[Type[BaseModel]], Handler]] = {}


def route(tag: RequestType, payload_model: Optional[Type[BaseModel]] = None):
    """Register the decorated function as the handler for ``tag``."""

    def decorator(func: Handler) -> Handler:
        _ROUTES[tag] = (payload_model, func)
        return func

    return decorator


def to_wire(value: Any) -> Any:
    """Reduce records to JSON-compatible structures; bytes are passed through."""

    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    if isinstance(value, dict):
        return {key: to_wire(item) for key, item in value.items()}
    return value


class Dispatcher:
    """Validates a request payload and runs the matching operation on ``store``.

    ``overrides`` lets a backend supply handlers for operations that depend on
    its storage driver, namely ``EXPORT_DB`` and ``WIPE_STORAGE``.
    """

    def __init__(
        self,
        store: HabitatStore,
        overrides: Optional[Mapping[RequestType, Callable[[Any], Any]]] = None,
    ) -> None:
        self.store = store
        self.overrides = dict(overrides or {})

    def handle(self, request_type: str, payload: Any = None) -> Any:
        """Run one operation and return its wire data; errors propagate."""

        try:
            tag = RequestType(request_type)
        except ValueError:
            raise UnsupportedOperationError(f"Unknown request type: {request_type}") from None

        if tag in self.overrides:
            return to_wire(self.overrides[tag](payload))

        payload_model, handler = _ROUTES[tag]
        if payload_model is not None:
            payload = payload_model.model_validate(payload if payload is not None else {})
        return to_wire(handler(self.store, payload))

    def dispatch(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Envelope form of :meth:`handle`: ``{"ok": True, "data"}`` or ``{"ok": False, "error"}``."""

        request_type = str(request.get("type"))
        try:
            data = self.handle(request_type, request.get("payload"))
        except (HabitatError, ValidationError, ValueError) as exc:
            logger.info("Request %s rejected: %s", request_type, exc)
            return {"ok": False, "error": str(exc)}
        except SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            logger.warning("Request %s failed in storage: %s", request_type, message)
            return {"ok": False, "error": message}
        except Exception as exc:
            logger.exception("Request %s failed", request_type)
            return {"ok": False, "error": str(exc)}
        return {"ok": True, "data": data}


# Habits


@route(RequestType.GET_HABITS)
def _get_habits(store: HabitatStore, _payload: Any) -> Any:
    return store.habit_repo.list_active()


@route(RequestType.GET_ARCHIVED_HABITS)
def _get_archived_habits(store: HabitatStore, _payload: Any) -> Any:
    return store.habit_repo.list_archived()


@route(RequestType.CREATE_HABIT, inputs.HabitCreate)
def _create_habit(store: HabitatStore, payload: inputs.HabitCreate) -> Any:
    return store.habit_repo.create(payload)


@route(RequestType.UPDATE_HABIT, inputs.HabitUpdate)
def _update_habit(store: HabitatStore, payload: inputs.HabitUpdate) -> Any:
    return store.habit_repo.update(payload)


@route(RequestType.ARCHIVE_HABIT, rq.IdPayload)
def _archive_habit(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.habit_repo.archive(payload.id)


@route(RequestType.DELETE_HABIT, rq.IdPayload)
def _delete_habit(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.habit_repo.delete(payload.id)


@route(RequestType.DELETE_ALL_HABITS)
def _delete_all_habits(store: HabitatStore, _payload: Any) -> Any:
    return store.habit_repo.delete_all()


@route(RequestType.PAUSE_HABIT, rq.PausePayload)
def _pause_habit(store: HabitatStore, payload: rq.PausePayload) -> Any:
    return store.habit_repo.pause(payload.id, payload.until)


@route(RequestType.PAUSE_ALL_HABITS, rq.PauseAllPayload)
def _pause_all_habits(store: HabitatStore, payload: rq.PauseAllPayload) -> Any:
    return store.habit_repo.pause_all(payload.until)


# Completions and streaks


@route(RequestType.GET_COMPLETIONS_FOR_DATE, rq.DatePayload)
def _completions_for_date(store: HabitatStore, payload: rq.DatePayload) -> Any:
    return store.habit_repo.get_completions_for_date(payload.date)


@route(RequestType.GET_COMPLETIONS_FOR_HABIT, rq.HabitRangePayload)
def _completions_for_habit(store: HabitatStore, payload: rq.HabitRangePayload) -> Any:
    return store.habit_repo.get_completions_for_habit(payload.habit_id, payload.start, payload.end)


@route(RequestType.GET_COMPLETIONS_FOR_DATE_RANGE, rq.RangePayload)
def _completions_for_range(store: HabitatStore, payload: rq.RangePayload) -> Any:
    return store.habit_repo.get_completions_for_range(payload.start, payload.end)


@route(RequestType.GET_ALL_COMPLETIONS)
def _all_completions(store: HabitatStore, _payload: Any) -> Any:
    return store.habit_repo.get_all_completions()


@route(RequestType.TOGGLE_COMPLETION, rq.TogglePayload)
def _toggle_completion(store: HabitatStore, payload: rq.TogglePayload) -> Any:
    return store.habit_repo.toggle_completion(
        payload.habit_id, payload.date, tags=payload.tags, annotations=payload.annotations
    )


@route(RequestType.GET_STREAK, rq.HabitIdPayload)
def _get_streak(store: HabitatStore, payload: rq.HabitIdPayload) -> Any:
    return store.habit_repo.get_streak(payload.habit_id)


# Numeric logs


@route(RequestType.GET_HABIT_LOGS_FOR_DATE, rq.DatePayload)
def _logs_for_date(store: HabitatStore, payload: rq.DatePayload) -> Any:
    return store.habit_repo.get_logs_for_date(payload.date)


@route(RequestType.GET_HABIT_LOGS_FOR_HABIT, rq.HabitRangePayload)
def _logs_for_habit(store: HabitatStore, payload: rq.HabitRangePayload) -> Any:
    return store.habit_repo.get_logs_for_habit(payload.habit_id, payload.start, payload.end)


@route(RequestType.GET_HABIT_LOGS_FOR_DATE_RANGE, rq.RangePayload)
def _logs_for_range(store: HabitatStore, payload: rq.RangePayload) -> Any:
    return store.habit_repo.get_logs_for_range(payload.start, payload.end)


@route(RequestType.LOG_HABIT_VALUE, rq.LogValuePayload)
def _log_value(store: HabitatStore, payload: rq.LogValuePayload) -> Any:
    return store.habit_repo.log_value(payload.habit_id, payload.date, payload.value, payload.notes or "")


@route(RequestType.DELETE_HABIT_LOG, rq.IdPayload)
def _delete_log(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.habit_repo.delete_log(payload.id)


# Schedules


@route(RequestType.GET_SCHEDULE_FOR_HABIT, rq.HabitIdPayload)
def _get_schedule(store: HabitatStore, payload: rq.HabitIdPayload) -> Any:
    return store.habit_repo.get_schedule(payload.habit_id)


@route(RequestType.UPDATE_HABIT_SCHEDULE, inputs.ScheduleUpdate)
def _update_schedule(store: HabitatStore, payload: inputs.ScheduleUpdate) -> Any:
    return store.habit_repo.update_schedule(payload)


# Check-ins


@route(RequestType.GET_CHECKIN_ENTRY, rq.DatePayload)
def _get_entry(store: HabitatStore, payload: rq.DatePayload) -> Any:
    return store.checkin_repo.get_entry(payload.date)


@route(RequestType.UPSERT_CHECKIN_ENTRY, rq.EntryUpsertPayload)
def _upsert_entry(store: HabitatStore, payload: rq.EntryUpsertPayload) -> Any:
    return store.checkin_repo.upsert_entry(payload.date, payload.content)


@route(RequestType.DELETE_CHECKIN_ENTRY, rq.IdPayload)
def _delete_entry(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.checkin_repo.delete_entry(payload.id)


@route(RequestType.GET_CHECKIN_ENTRIES, rq.RangePayload)
def _get_entries(store: HabitatStore, payload: rq.RangePayload) -> Any:
    return store.checkin_repo.list_entries(payload.start, payload.end)


@route(RequestType.DELETE_ALL_CHECKIN_ENTRIES)
def _delete_all_entries(store: HabitatStore, _payload: Any) -> Any:
    return store.checkin_repo.delete_all_entries()


@route(RequestType.GET_CHECKIN_TEMPLATES)
def _get_templates(store: HabitatStore, _payload: Any) -> Any:
    return store.checkin_repo.list_templates()


@route(RequestType.GET_CHECKIN_TEMPLATE, rq.IdPayload)
def _get_template(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.checkin_repo.get_template(payload.id)


@route(RequestType.CREATE_CHECKIN_TEMPLATE, inputs.CheckinTemplateCreate)
def _create_template(store: HabitatStore, payload: inputs.CheckinTemplateCreate) -> Any:
    return store.checkin_repo.create_template(payload)


@route(RequestType.UPDATE_CHECKIN_TEMPLATE, inputs.CheckinTemplateUpdate)
def _update_template(store: HabitatStore, payload: inputs.CheckinTemplateUpdate) -> Any:
    return store.checkin_repo.update_template(payload)


@route(RequestType.DELETE_CHECKIN_TEMPLATE, rq.IdPayload)
def _delete_template(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.checkin_repo.delete_template(payload.id)


@route(RequestType.DELETE_ALL_CHECKIN_DATA)
def _delete_all_checkin(store: HabitatStore, _payload: Any) -> Any:
    return store.checkin_repo.delete_all()


@route(RequestType.GET_CHECKIN_QUESTIONS, rq.TemplateIdPayload)
def _get_questions(store: HabitatStore, payload: rq.TemplateIdPayload) -> Any:
    return store.checkin_repo.list_questions(payload.template_id)


@route(RequestType.CREATE_CHECKIN_QUESTION, inputs.CheckinQuestionCreate)
def _create_question(store: HabitatStore, payload: inputs.CheckinQuestionCreate) -> Any:
    return store.checkin_repo.create_question(payload)


@route(RequestType.UPDATE_CHECKIN_QUESTION, inputs.CheckinQuestionUpdate)
def _update_question(store: HabitatStore, payload: inputs.CheckinQuestionUpdate) -> Any:
    return store.checkin_repo.update_question(payload)


@route(RequestType.DELETE_CHECKIN_QUESTION, rq.IdPayload)
def _delete_question(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.checkin_repo.delete_question(payload.id)


@route(RequestType.GET_CHECKIN_RESPONSES, rq.ResponsesQueryPayload)
def _get_responses(store: HabitatStore, payload: rq.ResponsesQueryPayload) -> Any:
    return store.checkin_repo.list_responses(payload.template_id, payload.date)


@route(RequestType.UPSERT_CHECKIN_RESPONSE, rq.ResponseUpsertPayload)
def _upsert_response(store: HabitatStore, payload: rq.ResponseUpsertPayload) -> Any:
    return store.checkin_repo.upsert_response(
        payload.question_id, payload.logged_date, payload.value_numeric, payload.value_text
    )


@route(RequestType.DELETE_CHECKIN_RESPONSE, rq.IdPayload)
def _delete_response(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.checkin_repo.delete_response(payload.id)


@route(RequestType.GET_CHECKIN_RESPONSE_DATES)
def _response_dates(store: HabitatStore, _payload: Any) -> Any:
    return store.checkin_repo.response_dates()


@route(RequestType.GET_CHECKIN_SUMMARY_FOR_DATE, rq.DatePayload)
def _summary_for_date(store: HabitatStore, payload: rq.DatePayload) -> Any:
    return store.checkin_repo.summary_for_date(payload.date)


# Scribbles


@route(RequestType.GET_SCRIBBLES)
def _get_scribbles(store: HabitatStore, _payload: Any) -> Any:
    return store.scribble_repo.list_all()


@route(RequestType.GET_SCRIBBLES_FOR_DATE, rq.DatePayload)
def _scribbles_for_date(store: HabitatStore, payload: rq.DatePayload) -> Any:
    return store.scribble_repo.list_for_date(payload.date)


@route(RequestType.CREATE_SCRIBBLE, inputs.ScribbleCreate)
def _create_scribble(store: HabitatStore, payload: inputs.ScribbleCreate) -> Any:
    return store.scribble_repo.create(payload)


@route(RequestType.UPDATE_SCRIBBLE, inputs.ScribbleUpdate)
def _update_scribble(store: HabitatStore, payload: inputs.ScribbleUpdate) -> Any:
    return store.scribble_repo.update(payload)


@route(RequestType.DELETE_SCRIBBLE, rq.IdPayload)
def _delete_scribble(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.scribble_repo.delete(payload.id)


@route(RequestType.DELETE_ALL_SCRIBBLES)
def _delete_all_scribbles(store: HabitatStore, _payload: Any) -> Any:
    return store.scribble_repo.delete_all()


# Reminders


@route(RequestType.GET_ALL_REMINDERS)
def _all_reminders(store: HabitatStore, _payload: Any) -> Any:
    return store.reminder_repo.list_all()


@route(RequestType.GET_REMINDERS_FOR_HABIT, rq.HabitIdPayload)
def _reminders_for_habit(store: HabitatStore, payload: rq.HabitIdPayload) -> Any:
    return store.reminder_repo.list_for_habit(payload.habit_id)


@route(RequestType.CREATE_REMINDER, inputs.ReminderCreate)
def _create_reminder(store: HabitatStore, payload: inputs.ReminderCreate) -> Any:
    return store.reminder_repo.create(payload)


@route(RequestType.DELETE_REMINDER, rq.IdPayload)
def _delete_reminder(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.reminder_repo.delete(payload.id)


@route(RequestType.GET_ALL_CHECKIN_REMINDERS)
def _all_checkin_reminders(store: HabitatStore, _payload: Any) -> Any:
    return store.reminder_repo.list_all_checkin()


@route(RequestType.GET_CHECKIN_REMINDERS_FOR_TEMPLATE, rq.TemplateIdPayload)
def _checkin_reminders_for_template(store: HabitatStore, payload: rq.TemplateIdPayload) -> Any:
    return store.reminder_repo.list_for_template(payload.template_id)


@route(RequestType.CREATE_CHECKIN_REMINDER, inputs.CheckinReminderCreate)
def _create_checkin_reminder(store: HabitatStore, payload: inputs.CheckinReminderCreate) -> Any:
    return store.reminder_repo.create_checkin(payload)


@route(RequestType.DELETE_CHECKIN_REMINDER, rq.IdPayload)
def _delete_checkin_reminder(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.reminder_repo.delete_checkin(payload.id)


# Bored list


@route(RequestType.GET_BORED_CATEGORIES)
def _bored_categories(store: HabitatStore, _payload: Any) -> Any:
    return store.bored_repo.list_categories()


@route(RequestType.CREATE_BORED_CATEGORY, inputs.BoredCategoryCreate)
def _create_bored_category(store: HabitatStore, payload: inputs.BoredCategoryCreate) -> Any:
    return store.bored_repo.create_category(payload)


@route(RequestType.UPDATE_BORED_CATEGORY, inputs.BoredCategoryUpdate)
def _update_bored_category(store: HabitatStore, payload: inputs.BoredCategoryUpdate) -> Any:
    return store.bored_repo.update_category(payload)


@route(RequestType.DELETE_BORED_CATEGORY, rq.IdPayload)
def _delete_bored_category(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.bored_repo.delete_category(payload.id)


@route(RequestType.GET_BORED_ACTIVITIES)
def _bored_activities(store: HabitatStore, _payload: Any) -> Any:
    return store.bored_repo.list_activities()


@route(RequestType.GET_BORED_ACTIVITIES_FOR_CATEGORY, rq.CategoryIdPayload)
def _bored_activities_for_category(store: HabitatStore, payload: rq.CategoryIdPayload) -> Any:
    return store.bored_repo.list_activities(payload.category_id)


@route(RequestType.CREATE_BORED_ACTIVITY, inputs.BoredActivityCreate)
def _create_bored_activity(store: HabitatStore, payload: inputs.BoredActivityCreate) -> Any:
    return store.bored_repo.create_activity(payload)


@route(RequestType.UPDATE_BORED_ACTIVITY, inputs.BoredActivityUpdate)
def _update_bored_activity(store: HabitatStore, payload: inputs.BoredActivityUpdate) -> Any:
    return store.bored_repo.update_activity(payload)


@route(RequestType.DELETE_BORED_ACTIVITY, rq.IdPayload)
def _delete_bored_activity(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.bored_repo.delete_activity(payload.id)


@route(RequestType.ARCHIVE_BORED_ACTIVITY, rq.IdPayload)
def _archive_bored_activity(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.bored_repo.archive_activity(payload.id)


@route(RequestType.MARK_BORED_ACTIVITY_DONE, rq.IdPayload)
def _mark_bored_activity_done(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.bored_repo.mark_done(payload.id)


@route(RequestType.GET_BORED_ORACLE, rq.OraclePayload)
def _bored_oracle(store: HabitatStore, payload: rq.OraclePayload) -> Any:
    return store.bored_repo.oracle(payload.excluded_category_ids, payload.max_minutes)


@route(RequestType.DELETE_ALL_BORED_DATA)
def _delete_all_bored(store: HabitatStore, _payload: Any) -> Any:
    return store.bored_repo.delete_all()


# Todos


@route(RequestType.GET_TODOS)
def _get_todos(store: HabitatStore, _payload: Any) -> Any:
    return store.todo_repo.list_open()


@route(RequestType.CREATE_TODO, inputs.TodoCreate)
def _create_todo(store: HabitatStore, payload: inputs.TodoCreate) -> Any:
    return store.todo_repo.create(payload)


@route(RequestType.UPDATE_TODO, inputs.TodoUpdate)
def _update_todo(store: HabitatStore, payload: inputs.TodoUpdate) -> Any:
    return store.todo_repo.update(payload)


@route(RequestType.DELETE_TODO, rq.IdPayload)
def _delete_todo(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.todo_repo.delete(payload.id)


@route(RequestType.ARCHIVE_TODO, rq.IdPayload)
def _archive_todo(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.todo_repo.archive(payload.id)


@route(RequestType.TOGGLE_TODO, rq.IdPayload)
def _toggle_todo(store: HabitatStore, payload: rq.IdPayload) -> Any:
    return store.todo_repo.toggle(payload.id)


@route(RequestType.DELETE_ALL_TODOS)
def _delete_all_todos(store: HabitatStore, _payload: Any) -> Any:
    return store.todo_repo.delete_all()


# Seed ledger


@route(RequestType.IS_DEFAULT_APPLIED, rq.KeyPayload)
def _is_default_applied(store: HabitatStore, payload: rq.KeyPayload) -> Any:
    return store.defaults_repo.is_applied(payload.key)


@route(RequestType.MARK_DEFAULT_APPLIED, rq.KeyPayload)
def _mark_default_applied(store: HabitatStore, payload: rq.KeyPayload) -> Any:
    return store.defaults_repo.mark_applied(payload.key)


@route(RequestType.CLEAR_APPLIED_DEFAULTS)
def _clear_applied_defaults(store: HabitatStore, _payload: Any) -> Any:
    return store.defaults_repo.clear()


# Diagnostics and snapshots


@route(RequestType.GET_DB_INFO)
def _db_info(store: HabitatStore, _payload: Any) -> Any:
    return store.db_info()


@route(RequestType.INTEGRITY_CHECK)
def _integrity_check(store: HabitatStore, _payload: Any) -> Any:
    return store.integrity_check()


@route(RequestType.EXPORT_JSON_DATA, ExportSelection)
def _export_json(store: HabitatStore, payload: ExportSelection) -> Any:
    return store.export_json(payload)


@route(RequestType.IMPORT_JSON)
def _import_json(store: HabitatStore, payload: Any) -> Any:
    if not isinstance(payload, Mapping):
        raise ValueError("IMPORT_JSON expects an export bundle object")
    return store.import_json(payload)


@route(RequestType.EXPORT_DB)
def _export_db(_store: HabitatStore, _payload: Any) -> Any:
    raise UnsupportedOperationError("Raw DB export is not supported on this backend")


@route(RequestType.WIPE_STORAGE)
def _wipe_storage(_store: HabitatStore, _payload: Any) -> Any:
    return None
