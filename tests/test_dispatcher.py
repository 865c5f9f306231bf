"""Tests for request routing, payload validation and the response envelope."""

from __future__ import annotations

import pytest

from habitat.dispatch import Dispatcher, RequestType
from habitat.dispatch.dispatcher import _ROUTES
from habitat.errors import UnsupportedOperationError


@pytest.fixture
def dispatcher(store):
    return Dispatcher(store)


def _ok(dispatcher, request_type, payload=None):
    response = dispatcher.dispatch({"type": request_type, "payload": payload})
    assert response["ok"], response.get("error")
    return response["data"]


class TestRouting:
    def test_every_tag_has_a_handler(self):
        assert set(_ROUTES) == set(RequestType)

    def test_unknown_tag_is_an_error_envelope(self, dispatcher):
        response = dispatcher.dispatch({"type": "MAKE_COFFEE"})
        assert response == {"ok": False, "error": "Unknown request type: MAKE_COFFEE"}

    def test_handle_raises_for_unknown_tag(self, dispatcher):
        with pytest.raises(UnsupportedOperationError):
            dispatcher.handle("MAKE_COFFEE")

    def test_overrides_win(self, store):
        dispatcher = Dispatcher(store, overrides={RequestType.GET_HABITS: lambda payload: "custom"})
        assert _ok(dispatcher, "GET_HABITS") == "custom"


class TestEnvelope:
    def test_habit_round_trip_over_the_wire(self, dispatcher, today):
        habit = _ok(dispatcher, "CREATE_HABIT", {"name": "Stretch", "tags": ["am"]})
        assert habit["schedule"]["schedule_type"] == "DAILY"

        completion = _ok(dispatcher, "TOGGLE_COMPLETION", {"habit_id": habit["id"], "date": today})
        assert completion["date"] == today

        streak = _ok(dispatcher, "GET_STREAK", {"habit_id": habit["id"]})
        assert streak == {"current": 1, "longest": 1}

        habits = _ok(dispatcher, "GET_HABITS")
        assert [h["tags"] for h in habits] == [["am"]]

    def test_range_payload_uses_from_and_to(self, dispatcher, today, days_ago):
        habit = _ok(dispatcher, "CREATE_HABIT", {"name": "Read"})
        _ok(dispatcher, "TOGGLE_COMPLETION", {"habit_id": habit["id"], "date": days_ago(1)})

        rows = _ok(
            dispatcher,
            "GET_COMPLETIONS_FOR_HABIT",
            {"habit_id": habit["id"], "from": days_ago(3), "to": today},
        )

        assert [row["date"] for row in rows] == [days_ago(1)]

    def test_validation_errors_are_reported(self, dispatcher):
        response = dispatcher.dispatch({"type": "CREATE_REMINDER", "payload": {"habit_id": "h"}})
        assert response["ok"] is False
        assert "trigger_time" in response["error"]

    def test_not_found_is_reported(self, dispatcher):
        response = dispatcher.dispatch({"type": "ARCHIVE_HABIT", "payload": {"id": "missing"}})
        assert response == {"ok": False, "error": "Habit not found: missing"}

    def test_storage_errors_carry_the_driver_message(self, dispatcher):
        response = dispatcher.dispatch(
            {"type": "CREATE_REMINDER", "payload": {"habit_id": "missing", "trigger_time": "08:00"}}
        )
        assert response["ok"] is False
        assert "FOREIGN KEY" in response["error"]

    def test_void_operations_return_null_data(self, dispatcher):
        assert dispatcher.dispatch({"type": "DELETE_ALL_SCRIBBLES"}) == {"ok": True, "data": None}

    def test_oracle_over_the_wire(self, dispatcher):
        suggestion = _ok(dispatcher, "GET_BORED_ORACLE", {"max_minutes": 10})
        assert suggestion["source"] == "activity"
        assert suggestion["activity"]["estimated_minutes"] <= 10


class TestDefaultDriverOperations:
    def test_export_db_is_unsupported_without_override(self, dispatcher):
        response = dispatcher.dispatch({"type": "EXPORT_DB"})
        assert response["ok"] is False
        assert "not supported" in response["error"]

    def test_json_export_and_import(self, dispatcher):
        bundle = _ok(dispatcher, "EXPORT_JSON_DATA", {"habits": True})
        assert bundle["version"] == 1
        assert _ok(dispatcher, "IMPORT_JSON", bundle) is None

    def test_import_rejects_unsupported_version(self, dispatcher):
        response = dispatcher.dispatch({"type": "IMPORT_JSON", "payload": {"version": 3}})
        assert response == {"ok": False, "error": "Unsupported export version: 3"}

    def test_diagnostics(self, dispatcher):
        assert _ok(dispatcher, "INTEGRITY_CHECK") == ["ok"]
        assert _ok(dispatcher, "GET_DB_INFO")["user_version"] == 11

    def test_seed_ledger_tags(self, dispatcher):
        assert _ok(dispatcher, "IS_DEFAULT_APPLIED", {"key": "checkin_template:morning_checkin"})
        _ok(dispatcher, "CLEAR_APPLIED_DEFAULTS")
        assert not _ok(dispatcher, "IS_DEFAULT_APPLIED", {"key": "checkin_template:morning_checkin"})
        _ok(dispatcher, "MARK_DEFAULT_APPLIED", {"key": "custom"})
        assert _ok(dispatcher, "IS_DEFAULT_APPLIED", {"key": "custom"})


class TestCalendarDays:
    @pytest.mark.parametrize("day", ["2024-5-1", "not-a-date", "2024-02-30", "20240501"])
    def test_toggle_rejects_malformed_days(self, dispatcher, day):
        habit = _ok(dispatcher, "CREATE_HABIT", {"name": "Stretch"})

        response = dispatcher.dispatch(
            {"type": "TOGGLE_COMPLETION", "payload": {"habit_id": habit["id"], "date": day}}
        )

        assert response["ok"] is False
        window = {"habit_id": habit["id"], "from": "2000-01-01", "to": "2100-12-31"}
        assert _ok(dispatcher, "GET_COMPLETIONS_FOR_HABIT", window) == []
        assert _ok(dispatcher, "GET_STREAK", {"habit_id": habit["id"]}) == {"current": 0, "longest": 0}

    @pytest.mark.parametrize(
        "request_type,payload",
        [
            ("LOG_HABIT_VALUE", {"habit_id": "h", "date": "2024-5-1", "value": 1}),
            ("GET_COMPLETIONS_FOR_DATE", {"date": "yesterday"}),
            ("GET_COMPLETIONS_FOR_DATE_RANGE", {"from": "2024-01-01", "to": "2024-1-31"}),
            ("PAUSE_ALL_HABITS", {"until": "2024-13-01"}),
            ("UPSERT_CHECKIN_ENTRY", {"date": "01/05/2024", "content": "x"}),
            ("UPSERT_CHECKIN_RESPONSE", {"question_id": "q", "logged_date": "2024-05-1"}),
        ],
    )
    def test_day_fields_are_validated(self, dispatcher, request_type, payload):
        response = dispatcher.dispatch({"type": request_type, "payload": payload})
        assert response["ok"] is False
        assert "date" in response["error"] or "calendar day" in response["error"]

    def test_import_rejects_malformed_completion_day(self, dispatcher, today):
        habit = _ok(dispatcher, "CREATE_HABIT", {"name": "Read"})
        _ok(dispatcher, "TOGGLE_COMPLETION", {"habit_id": habit["id"], "date": today})
        bundle = _ok(dispatcher, "EXPORT_JSON_DATA", {"habits": True, "completions": True})
        _ok(dispatcher, "DELETE_ALL_HABITS")
        bundle["completions"][0]["date"] = "not-a-date"

        response = dispatcher.dispatch({"type": "IMPORT_JSON", "payload": bundle})

        assert response["ok"] is False
        assert _ok(dispatcher, "GET_HABITS") == []
