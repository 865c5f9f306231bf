"""Tests for scribbles (free-form notes) and reminder trigger rows."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from habitat.domain.inputs import (
    CheckinReminderCreate,
    ReminderCreate,
    ScribbleCreate,
    ScribbleUpdate,
)
from habitat.errors import NotFoundError
from habitat.infra import clock


class TestScribbles:
    def test_create_and_list(self, store):
        note = store.scribble_repo.create(
            ScribbleCreate(title="Idea", content="soup", tags=["food"], annotations={"mood": "good"})
        )

        (listed,) = store.scribble_repo.list_all()

        assert listed == note
        assert listed.tags == ["food"]

    def test_update_always_moves_updated_at(self, store):
        note = store.scribble_repo.create(ScribbleCreate(title="Idea"))

        updated = store.scribble_repo.update(ScribbleUpdate(id=note.id))

        assert updated.updated_at >= note.updated_at
        assert updated.title == "Idea"

    def test_null_title_becomes_empty(self, store):
        note = store.scribble_repo.create(ScribbleCreate(title="Idea", content="body"))

        updated = store.scribble_repo.update(ScribbleUpdate(id=note.id, title=None))

        assert updated.title == ""
        assert updated.content == "body"

    def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            store.scribble_repo.update(ScribbleUpdate(id="missing", title="x"))

    def test_list_for_date_uses_last_edit_day(self, store):
        store.scribble_repo.create(ScribbleCreate(title="Today"))

        assert [s.title for s in store.scribble_repo.list_for_date(clock.today())] == ["Today"]
        assert store.scribble_repo.list_for_date("1999-01-01") == []

    def test_delete_and_delete_all(self, store):
        first = store.scribble_repo.create(ScribbleCreate(title="a"))
        store.scribble_repo.create(ScribbleCreate(title="b"))

        store.scribble_repo.delete(first.id)
        assert [s.title for s in store.scribble_repo.list_all()] == ["b"]

        store.scribble_repo.delete_all()
        assert store.scribble_repo.list_all() == []


class TestReminders:
    def test_reminders_sorted_by_trigger_time(self, store, habit_factory):
        habit = habit_factory()
        store.reminder_repo.create(ReminderCreate(habit_id=habit.id, trigger_time="21:00"))
        store.reminder_repo.create(
            ReminderCreate(habit_id=habit.id, trigger_time="07:15", days_active=[1, 2, 3])
        )

        reminders = store.reminder_repo.list_for_habit(habit.id)

        assert [r.trigger_time for r in reminders] == ["07:15", "21:00"]
        assert reminders[0].days_active == [1, 2, 3]
        assert reminders[1].days_active is None
        assert store.reminder_repo.list_all() == reminders

    @pytest.mark.parametrize("bad", ["7:15", "24:00", "12:60", "noon", ""])
    def test_trigger_time_must_be_hh_mm(self, bad):
        with pytest.raises(ValidationError):
            ReminderCreate(habit_id="h", trigger_time=bad)

    def test_reminder_for_missing_habit_violates_foreign_key(self, store):
        with pytest.raises(IntegrityError):
            store.reminder_repo.create(ReminderCreate(habit_id="missing", trigger_time="08:00"))

    def test_delete_reminder(self, store, habit_factory):
        habit = habit_factory()
        reminder = store.reminder_repo.create(ReminderCreate(habit_id=habit.id, trigger_time="08:00"))

        store.reminder_repo.delete(reminder.id)

        assert store.reminder_repo.list_all() == []

    def test_checkin_reminders(self, store, template_factory):
        template = template_factory()
        reminder = store.reminder_repo.create_checkin(
            CheckinReminderCreate(template_id=template.id, trigger_time="20:30", days_active=[0])
        )

        assert store.reminder_repo.list_all_checkin() == [reminder]
        assert store.reminder_repo.list_for_template(template.id) == [reminder]

        store.reminder_repo.delete_checkin(reminder.id)
        assert store.reminder_repo.list_all_checkin() == []
