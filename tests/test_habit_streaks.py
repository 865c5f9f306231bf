"""Tests for streak calculation.

Covers the pure run-length algorithm and the per-type qualifying-day queries:
- BOOLEAN habits count days with a completion row
- NUMERIC habits count days whose logged total meets the target
- LIMIT habits count tracked days whose total stays under the ceiling
"""

from __future__ import annotations

from datetime import date, timedelta

from habitat.services.streaks import compute_streaks

ANCHOR = date(2024, 3, 10)


def _day(offset: int) -> str:
    return (ANCHOR - timedelta(days=offset)).isoformat()


class TestComputeStreaks:
    """The algorithm over plain day strings, anchored on a fixed date."""

    def test_empty_history(self):
        assert compute_streaks([], today=ANCHOR) == (0, 0)

    def test_consecutive_days_ending_today(self):
        days = [_day(i) for i in range(5)]
        assert compute_streaks(days, today=ANCHOR) == (5, 5)

    def test_gap_breaks_current_but_not_longest(self):
        days = [_day(0), _day(1), _day(3), _day(4), _day(5), _day(6)]
        assert compute_streaks(days, today=ANCHOR) == (2, 4)

    def test_missing_today_means_no_current_streak(self):
        days = [_day(1), _day(2), _day(3)]
        assert compute_streaks(days, today=ANCHOR) == (0, 3)

    def test_future_days_are_skipped_for_current(self):
        days = [_day(-2), _day(-1), _day(0), _day(1)]
        current, longest = compute_streaks(days, today=ANCHOR)
        assert current == 2
        assert longest == 4

    def test_duplicates_and_order_do_not_matter(self):
        days = [_day(2), _day(0), _day(1), _day(0)]
        assert compute_streaks(days, today=ANCHOR) == (3, 3)

    def test_month_boundary_is_consecutive(self):
        days = ["2024-02-28", "2024-02-29", "2024-03-01"]
        assert compute_streaks(days, today="2024-03-01") == (3, 3)

    def test_anchor_accepts_strings(self):
        assert compute_streaks([_day(0)], today=ANCHOR.isoformat()) == (1, 1)


class TestBooleanHabitStreak:
    def test_completions_drive_the_streak(self, store, habit_factory, days_ago):
        habit = habit_factory(name="Meditate")
        for offset in (0, 1, 2, 4):
            store.habit_repo.toggle_completion(habit.id, days_ago(offset))

        streak = store.habit_repo.get_streak(habit.id)

        assert streak.current == 3
        assert streak.longest == 3

    def test_untoggled_day_breaks_the_streak(self, store, habit_factory, days_ago):
        habit = habit_factory(name="Meditate")
        for offset in (0, 1, 2):
            store.habit_repo.toggle_completion(habit.id, days_ago(offset))
        store.habit_repo.toggle_completion(habit.id, days_ago(1))

        assert store.habit_repo.get_streak(habit.id).current == 1

    def test_unknown_habit_has_no_streak(self, store):
        streak = store.habit_repo.get_streak("missing")
        assert (streak.current, streak.longest) == (0, 0)


class TestNumericHabitStreak:
    def test_three_day_run_stops_at_the_gap(self, store, habit_factory, days_ago):
        habit = habit_factory(name="Pages", type="NUMERIC", target_value=10)
        for offset in (0, 1, 2, 4):
            store.habit_repo.log_value(habit.id, days_ago(offset), 10)

        assert store.habit_repo.get_streak(habit.id).current == 3

    def test_logs_on_one_day_are_summed(self, store, habit_factory, today):
        habit = habit_factory(name="Water", type="NUMERIC", target_value=8)
        store.habit_repo.log_value(habit.id, today, 3)
        store.habit_repo.log_value(habit.id, today, 5)

        assert store.habit_repo.get_streak(habit.id).current == 1

    def test_day_below_target_does_not_qualify(self, store, habit_factory, today, days_ago):
        habit = habit_factory(name="Water", type="NUMERIC", target_value=8)
        store.habit_repo.log_value(habit.id, today, 8)
        store.habit_repo.log_value(habit.id, days_ago(1), 7.5)
        store.habit_repo.log_value(habit.id, days_ago(2), 9)

        streak = store.habit_repo.get_streak(habit.id)

        assert streak.current == 1
        assert streak.longest == 1


class TestLimitHabitStreak:
    def test_staying_under_the_ceiling_qualifies(self, store, habit_factory, today, days_ago):
        habit = habit_factory(name="Coffee", type="LIMIT", target_value=3)
        store.habit_repo.log_value(habit.id, today, 1)
        store.habit_repo.log_value(habit.id, days_ago(1), 2)
        store.habit_repo.log_value(habit.id, days_ago(2), 3)

        streak = store.habit_repo.get_streak(habit.id)

        assert streak.current == 2

    def test_untracked_day_does_not_qualify(self, store, habit_factory, today, days_ago):
        habit = habit_factory(name="Coffee", type="LIMIT", target_value=3)
        store.habit_repo.log_value(habit.id, today, 0)
        store.habit_repo.log_value(habit.id, days_ago(2), 1)

        assert store.habit_repo.qualifying_days(habit.id) == [today, days_ago(2)]
        assert store.habit_repo.get_streak(habit.id).current == 1
