"""Tests for the bored list, todos and the random suggestion oracle."""

from __future__ import annotations

import random
from datetime import date

import pytest

from habitat.domain.inputs import BoredActivityUpdate, BoredCategoryUpdate, TodoUpdate
from habitat.domain.records import ActivitySuggestion, TodoSuggestion
from habitat.errors import NotFoundError
from habitat.services.oracle import build_pool, pick
from habitat.services.recurrence import add_months, next_due


class TestBoredCategories:
    def test_user_categories_follow_system_ones(self, store, category_factory):
        mine = category_factory(name="Mine", sort_order=-1)

        categories = store.bored_repo.list_categories()

        assert categories[-1].id == mine.id
        assert not categories[-1].is_system

    def test_update_category(self, store, category_factory):
        category = category_factory(name="Outdoors")

        updated = store.bored_repo.update_category(
            BoredCategoryUpdate(id=category.id, name="Outside", color="#00ff00")
        )

        assert (updated.name, updated.color) == ("Outside", "#00ff00")

    def test_system_categories_cannot_be_deleted(self, store):
        store.bored_repo.delete_category("bored-cat-reading")
        assert "bored-cat-reading" in {c.id for c in store.bored_repo.list_categories()}

    def test_deleting_user_category_cascades_to_activities(self, store, category_factory, activity_factory):
        category = category_factory()
        activity_factory(category_id=category.id)

        store.bored_repo.delete_category(category.id)

        assert store.bored_repo.list_activities(category.id) == []

    def test_delete_all_keeps_system_categories(self, store, category_factory, activity_factory):
        activity_factory()

        store.bored_repo.delete_all()

        assert store.bored_repo.list_activities() == []
        assert all(c.is_system for c in store.bored_repo.list_categories())
        assert len(store.bored_repo.list_categories()) == 5


class TestBoredActivities:
    def test_seeded_activities_are_listed(self, store):
        assert len(store.bored_repo.list_activities("bored-cat-idle")) == 4

    def test_mark_done_closes_one_off_activity(self, store, activity_factory):
        activity = activity_factory()

        done = store.bored_repo.mark_done(activity.id)

        assert done.is_done
        assert done.done_at is not None
        assert done.done_count == 1
        assert done.last_done_at == done.done_at

    def test_mark_done_keeps_recurring_activity_open(self, store, activity_factory):
        activity = activity_factory(is_recurring=True, recurrence_rule="weekly")

        store.bored_repo.mark_done(activity.id)
        done = store.bored_repo.mark_done(activity.id)

        assert not done.is_done
        assert done.done_at is None
        assert done.done_count == 2
        assert done.last_done_at is not None

    def test_update_and_archive(self, store, activity_factory):
        activity = activity_factory(estimated_minutes=30)

        updated = store.bored_repo.update_activity(
            BoredActivityUpdate(id=activity.id, title="Jog", estimated_minutes=None, tags=["cardio"])
        )
        assert updated.title == "Jog"
        assert updated.estimated_minutes is None
        assert updated.tags == ["cardio"]

        store.bored_repo.archive_activity(activity.id)
        assert activity.id not in {a.id for a in store.bored_repo.list_activities()}

    def test_missing_activity_raises(self, store):
        with pytest.raises(NotFoundError):
            store.bored_repo.mark_done("missing")
        with pytest.raises(NotFoundError):
            store.bored_repo.archive_activity("missing")
        with pytest.raises(NotFoundError):
            store.bored_repo.update_activity(BoredActivityUpdate(id="missing", title="x"))

    def test_delete_activity(self, store, activity_factory):
        activity = activity_factory()
        store.bored_repo.delete_activity(activity.id)
        store.bored_repo.delete_activity(activity.id)
        assert store.bored_repo.list_activities(activity.category_id) == []


class TestOracle:
    def test_single_candidate_is_always_returned(self, store, activity_factory):
        store.bored_repo.delete_all()
        only = activity_factory(title="Only one")

        for _ in range(5):
            result = store.bored_repo.oracle()
            assert isinstance(result, ActivitySuggestion)
            assert result.activity.id == only.id
            assert result.category.id == only.category_id

    def test_empty_pool_returns_none(self, store):
        store.bored_repo.delete_all()
        assert store.bored_repo.oracle() is None

    def test_exclusions_and_time_ceiling(self, store, category_factory, activity_factory):
        store.bored_repo.delete_all()
        short = activity_factory(title="Short", estimated_minutes=5)
        activity_factory(title="Long", category_id=short.category_id, estimated_minutes=90)
        other = activity_factory(title="Elsewhere", estimated_minutes=5)

        result = store.bored_repo.oracle(excluded_category_ids=[other.category_id], max_minutes=10)

        assert result.activity.id == short.id

    def test_done_one_off_activity_leaves_the_pool(self, store, activity_factory):
        store.bored_repo.delete_all()
        activity = activity_factory()
        store.bored_repo.mark_done(activity.id)

        assert store.bored_repo.oracle() is None

    def test_flagged_todos_join_the_pool(self, store, todo_factory):
        store.bored_repo.delete_all()
        todo = todo_factory(title="Tidy desk", show_in_bored=True, bored_category_id="bored-cat-chores")
        todo_factory(title="Not flagged")

        result = store.bored_repo.oracle()

        assert isinstance(result, TodoSuggestion)
        assert result.todo.id == todo.id
        assert result.category.id == "bored-cat-chores"

    def test_pick_is_driven_by_the_rng(self, store, activity_factory):
        activities = [activity_factory(title=f"a{i}") for i in range(3)]
        categories = {c.id: c for c in store.bored_repo.list_categories()}
        pool = build_pool(activities, [], categories)

        first = [pick(pool, random.Random(7)).activity.id for _ in range(3)]
        second = [pick(pool, random.Random(7)).activity.id for _ in range(3)]

        assert first == second
        assert pick([], random.Random(7)) is None


class TestTodos:
    def test_toggle_closes_and_reopens(self, store, todo_factory):
        todo = todo_factory()

        done = store.todo_repo.toggle(todo.id)
        assert done.is_done
        assert done.done_count == 1

        reopened = store.todo_repo.toggle(todo.id)
        assert not reopened.is_done
        assert reopened.done_at is None

    @pytest.mark.parametrize(
        "rule,due,expected",
        [
            ("daily", "2024-05-31", "2024-06-01"),
            ("weekly", "2024-12-28", "2025-01-04"),
            ("monthly", "2024-01-31", "2024-02-29"),
            (None, "2024-02-28", "2024-02-29"),
        ],
    )
    def test_toggle_advances_recurring_todo(self, store, todo_factory, rule, due, expected):
        todo = todo_factory(is_recurring=True, recurrence_rule=rule, due_date=due)

        advanced = store.todo_repo.toggle(todo.id)

        assert advanced.due_date == expected
        assert not advanced.is_done
        assert advanced.done_count == 1
        assert advanced.last_done_at is not None

    def test_recurring_todo_without_due_date_closes(self, store, todo_factory):
        todo = todo_factory(is_recurring=True, recurrence_rule="daily")
        assert store.todo_repo.toggle(todo.id).is_done

    def test_update_moves_updated_at_only_on_change(self, store, todo_factory):
        todo = todo_factory(priority="low")

        unchanged = store.todo_repo.update(TodoUpdate(id=todo.id))
        assert unchanged.updated_at == todo.updated_at

        changed = store.todo_repo.update(TodoUpdate(id=todo.id, priority="high"))
        assert changed.priority == "high"

    def test_due_date_must_be_a_calendar_day(self):
        with pytest.raises(ValueError):
            TodoUpdate(id="t", due_date="tomorrow")

    def test_archive_hides_todo(self, store, todo_factory):
        todo = todo_factory()
        store.todo_repo.archive(todo.id)
        assert store.todo_repo.list_open() == []

    def test_missing_todo_raises(self, store):
        with pytest.raises(NotFoundError):
            store.todo_repo.toggle("missing")
        with pytest.raises(NotFoundError):
            store.todo_repo.archive("missing")

    def test_deleting_bored_category_unlinks_todo(self, store, category_factory, todo_factory):
        category = category_factory()
        todo = todo_factory(show_in_bored=True, bored_category_id=category.id)

        store.bored_repo.delete_category(category.id)

        (remaining,) = store.todo_repo.list_open()
        assert remaining.id == todo.id
        assert remaining.bored_category_id is None

    def test_delete_and_delete_all(self, store, todo_factory):
        first = todo_factory(title="a")
        todo_factory(title="b")

        store.todo_repo.delete(first.id)
        assert [t.title for t in store.todo_repo.list_open()] == ["b"]

        store.todo_repo.delete_all()
        assert store.todo_repo.list_open() == []


class TestRecurrence:
    def test_add_months_clamps_to_month_end(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 3, 31), 1) == date(2024, 4, 30)
        assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)

    def test_unknown_rule_leaves_date(self):
        assert next_due("2024-05-01", "yearly") == "2024-05-01"
