"""Tests for row/record conversion and malformed JSON tolerance."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import update

from habitat.domain.inputs import HabitUpdate, TodoUpdate
from habitat.infra import codec
from habitat.models import Habit, Scribble, Todo


class TestSafeJsonLoads:
    @pytest.mark.parametrize("text", ['["a", "b"', "not json", "{"])
    def test_malformed_text_returns_default(self, text):
        assert codec.safe_json_loads(text, []) == []

    def test_null_returns_default(self):
        assert codec.safe_json_loads(None, {}) == {}

    def test_malformed_text_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="habitat.codec"):
            codec.safe_json_loads("[1,", [], column="habits.tags")
        assert "habits.tags" in caplog.text


class TestHabitRoundTrip:
    @pytest.mark.parametrize(
        "tags,annotations",
        [
            ([], {}),
            (["health", "morning"], {"why": "energy", "cue": "after coffee"}),
            (["ünïcode ✓"], {"k": ""}),
        ],
    )
    def test_tags_and_annotations_survive_storage(self, store, habit_factory, tags, annotations):
        habit = habit_factory(tags=tags, annotations=annotations)

        loaded = store.habit_repo.get_by_id(habit.id)

        assert loaded.tags == tags
        assert loaded.annotations == annotations

    def test_record_to_row_to_record(self):
        original = Habit(
            id="h1",
            name="Read",
            created_at="2024-05-01T00:00:00.000Z",
            tags='["a"]',
            annotations='{"b": "c"}',
        )

        record = codec.row_to_habit(Habit(**codec.habit_to_row(codec.row_to_habit(original))))

        assert record.tags == ["a"]
        assert record.annotations == {"b": "c"}


class TestMalformedColumns:
    def test_truncated_tags_read_as_empty(self, store, session_factory, habit_factory):
        broken = habit_factory(name="Broken", tags=["x"])
        healthy = habit_factory(name="Healthy", tags=["y"])
        with session_factory() as session:
            session.connection().execute(
                update(Habit).where(Habit.id == broken.id).values(tags='["x", "y', annotations="{")
            )

        habits = {habit.name: habit for habit in store.habit_repo.list_active()}

        assert habits["Broken"].tags == []
        assert habits["Broken"].annotations == {}
        assert habits["Healthy"].tags == ["y"]

    def test_wrong_json_shape_reads_as_default(self):
        row = Scribble(
            id="s1", tags='{"not": "a list"}', annotations="[1, 2]",
            created_at="2024-01-01T00:00:00.000Z", updated_at="2024-01-01T00:00:00.000Z",
        )
        record = codec.row_to_scribble(row)
        assert record.tags == []
        assert record.annotations == {}

    def test_non_integer_days_read_as_every_day(self):
        from habitat.models import Reminder

        row = Reminder(id="r1", habit_id="h1", trigger_time="08:00", days_active='["mon"]')
        assert codec.row_to_reminder(row).days_active is None


class TestFlags:
    def test_integer_flags_become_booleans(self):
        row = Todo(
            id="t1", title="x", is_done=1, is_recurring=0, show_in_bored=1,
            created_at="2024-01-01T00:00:00.000Z", updated_at="2024-01-01T00:00:00.000Z",
        )
        record = codec.row_to_todo(row)
        assert record.is_done is True
        assert record.is_recurring is False
        assert record.show_in_bored is True
        assert codec.todo_to_row(record)["is_done"] == 1


class TestApplyChanges:
    def test_none_is_ignored_for_not_null_columns(self, store, habit_factory):
        habit = habit_factory(name="Stretch", description="five minutes")

        updated = store.habit_repo.update(HabitUpdate(id=habit.id, description=None, color="#000000"))

        assert updated.description == "five minutes"
        assert updated.color == "#000000"

    def test_none_clears_nullable_columns(self, store, todo_factory):
        todo = todo_factory(due_date="2024-06-01", estimated_minutes=20)

        updated = store.todo_repo.update(TodoUpdate(id=todo.id, due_date=None))

        assert updated.due_date is None
        assert updated.estimated_minutes == 20
