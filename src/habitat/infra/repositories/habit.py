"""SQLModel implementation of the habit repository.

Covers habits and their schedules, completions, numeric logs and streaks.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import delete, func, update
from sqlmodel import Session, select

from ...domain.inputs import HabitCreate, HabitUpdate, ScheduleUpdate
from ...domain.records import (
    CompletionRecord,
    HabitLogRecord,
    HabitWithSchedule,
    ScheduleRecord,
    Streak,
)
from ...errors import NotFoundError
from ...models import Completion, Habit, HabitLog, HabitSchedule
from ...services.streaks import compute_streaks
from ..clock import new_id, utc_now
from ..codec import (
    apply_changes,
    dump_json_list,
    dump_json_map,
    row_to_completion,
    row_to_habit_log,
    row_to_habit_with_schedule,
    row_to_schedule,
)
from ..database import SessionFactory

_HABIT_NULLABLE = frozenset({"archived_at", "paused_until"})
_SCHEDULE_NULLABLE = frozenset(
    {"frequency_count", "days_of_week", "due_time", "start_date", "end_date"}
)


def _with_schedule():
    return select(Habit, HabitSchedule).join(
        HabitSchedule, HabitSchedule.habit_id == Habit.id, isouter=True
    )


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    # Habits

    def _load(self, session: Session, habit_id: str) -> HabitWithSchedule:
        pair = session.exec(_with_schedule().where(Habit.id == habit_id)).first()
        if pair is None:
            raise NotFoundError("Habit", habit_id)
        habit, schedule = pair
        return row_to_habit_with_schedule(habit, schedule)

    def _require(self, session: Session, habit_id: str) -> Habit:
        habit = session.get(Habit, habit_id)
        if habit is None:
            raise NotFoundError("Habit", habit_id)
        return habit

    def get_by_id(self, habit_id: str) -> Optional[HabitWithSchedule]:
        """Retrieve a habit with its schedule, archived or not."""
        with self.session_factory() as session:
            pair = session.exec(_with_schedule().where(Habit.id == habit_id)).first()
            return row_to_habit_with_schedule(*pair) if pair else None

    def list_active(self) -> list[HabitWithSchedule]:
        """Unarchived habits, oldest first."""
        with self.session_factory() as session:
            statement = (
                _with_schedule()
                .where(Habit.archived_at.is_(None))  # type: ignore[union-attr]
                .order_by(Habit.created_at)
            )
            return [row_to_habit_with_schedule(h, s) for h, s in session.exec(statement).all()]

    def list_archived(self) -> list[HabitWithSchedule]:
        """Archived habits, most recently archived first."""
        with self.session_factory() as session:
            statement = (
                _with_schedule()
                .where(Habit.archived_at.is_not(None))  # type: ignore[union-attr]
                .order_by(Habit.archived_at.desc())  # type: ignore[union-attr]
            )
            return [row_to_habit_with_schedule(h, s) for h, s in session.exec(statement).all()]

    def create(self, data: HabitCreate) -> HabitWithSchedule:
        """Insert the habit, then its default daily schedule, in one transaction."""
        created_at = utc_now()
        habit = Habit(
            id=new_id(),
            name=data.name,
            description=data.description,
            color=data.color,
            icon=data.icon,
            frequency=data.frequency,
            created_at=created_at,
            tags=dump_json_list(data.tags),
            annotations=dump_json_map(data.annotations),
            type=data.type,
            target_value=data.target_value,
            paused_until=data.paused_until,
        )
        schedule = HabitSchedule(
            id=new_id(),
            habit_id=habit.id,
            schedule_type="DAILY",
            start_date=created_at[:10],
        )
        with self.session_factory() as session:
            session.add(habit)
            session.flush()
            session.add(schedule)
            session.flush()
            return row_to_habit_with_schedule(habit, schedule)

    def update(self, data: HabitUpdate) -> HabitWithSchedule:
        """Apply only the fields present in ``data``."""
        changes = data.model_dump(exclude_unset=True)
        habit_id = changes.pop("id")
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            apply_changes(habit, changes, nullable=_HABIT_NULLABLE)
            session.add(habit)
            session.flush()
            return self._load(session, habit_id)

    def archive(self, habit_id: str) -> None:
        """Soft delete: the habit leaves active listings but keeps its history."""
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            habit.archived_at = utc_now()
            session.add(habit)

    def delete(self, habit_id: str) -> None:
        """Hard delete; completions, logs, schedule and reminders cascade."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit:
                session.delete(habit)

    def delete_all(self) -> None:
        with self.session_factory() as session:
            session.connection().execute(delete(Habit))

    def pause(self, habit_id: str, until: Optional[str]) -> HabitWithSchedule:
        """Set or clear (``until=None``) the pause date."""
        with self.session_factory() as session:
            habit = self._require(session, habit_id)
            habit.paused_until = until
            session.add(habit)
            session.flush()
            return self._load(session, habit_id)

    def pause_all(self, until: Optional[str]) -> None:
        """Pause every active habit; archived habits keep their value."""
        with self.session_factory() as session:
            session.connection().execute(
                update(Habit)
                .where(Habit.archived_at.is_(None))  # type: ignore[union-attr]
                .values(paused_until=until)
            )

    # Schedules

    def get_schedule(self, habit_id: str) -> Optional[ScheduleRecord]:
        with self.session_factory() as session:
            row = session.exec(
                select(HabitSchedule).where(HabitSchedule.habit_id == habit_id)
            ).first()
            return row_to_schedule(row) if row else None

    def update_schedule(self, data: ScheduleUpdate) -> ScheduleRecord:
        changes = data.model_dump(exclude_unset=True)
        schedule_id = changes.pop("id")
        with self.session_factory() as session:
            row = session.get(HabitSchedule, schedule_id)
            if row is None:
                raise NotFoundError("HabitSchedule", schedule_id)
            apply_changes(row, changes, nullable=_SCHEDULE_NULLABLE)
            session.add(row)
            session.flush()
            return row_to_schedule(row)

    # Completions

    def get_completions_for_date(self, day: str) -> list[CompletionRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(Completion).where(Completion.date == day).order_by(Completion.completed_at)
            ).all()
            return [row_to_completion(row) for row in rows]

    def get_completions_for_habit(
        self, habit_id: str, start: str, end: str
    ) -> list[CompletionRecord]:
        """Completions for one habit with ``start <= date <= end``."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Completion)
                .where(Completion.habit_id == habit_id)
                .where(Completion.date >= start)
                .where(Completion.date <= end)
                .order_by(Completion.date)
            ).all()
            return [row_to_completion(row) for row in rows]

    def get_completions_for_range(self, start: str, end: str) -> list[CompletionRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(Completion)
                .where(Completion.date >= start)
                .where(Completion.date <= end)
                .order_by(Completion.date)
            ).all()
            return [row_to_completion(row) for row in rows]

    def get_all_completions(self) -> list[CompletionRecord]:
        """Every completion, newest date first."""
        with self.session_factory() as session:
            rows = session.exec(select(Completion).order_by(Completion.date.desc())).all()  # type: ignore[attr-defined]
            return [row_to_completion(row) for row in rows]

    def toggle_completion(
        self,
        habit_id: str,
        day: str,
        *,
        tags: Optional[list[str]] = None,
        annotations: Optional[dict[str, str]] = None,
    ) -> Optional[CompletionRecord]:
        """Delete the (habit, day) completion if present and return None, else insert it.

        Read-then-branch is safe only because a single writer owns the file.
        """
        with self.session_factory() as session:
            self._require(session, habit_id)
            existing = session.exec(
                select(Completion)
                .where(Completion.habit_id == habit_id)
                .where(Completion.date == day)
            ).first()
            if existing is not None:
                session.delete(existing)
                return None
            completion = Completion(
                id=new_id(),
                habit_id=habit_id,
                date=day,
                completed_at=utc_now(),
                notes="",
                tags=dump_json_list(tags),
                annotations=dump_json_map(annotations),
            )
            session.add(completion)
            session.flush()
            return row_to_completion(completion)

    # Numeric logs

    def get_logs_for_date(self, day: str) -> list[HabitLogRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(HabitLog).where(HabitLog.date == day).order_by(HabitLog.logged_at)
            ).all()
            return [row_to_habit_log(row) for row in rows]

    def get_logs_for_habit(self, habit_id: str, start: str, end: str) -> list[HabitLogRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.date >= start)
                .where(HabitLog.date <= end)
                .order_by(HabitLog.date, HabitLog.logged_at)
            ).all()
            return [row_to_habit_log(row) for row in rows]

    def get_logs_for_range(self, start: str, end: str) -> list[HabitLogRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(HabitLog)
                .where(HabitLog.date >= start)
                .where(HabitLog.date <= end)
                .order_by(HabitLog.date, HabitLog.logged_at)
            ).all()
            return [row_to_habit_log(row) for row in rows]

    def log_value(self, habit_id: str, day: str, value: float, notes: str = "") -> HabitLogRecord:
        """Append an observation; several logs on one day are summed by the streak query."""
        with self.session_factory() as session:
            self._require(session, habit_id)
            log = HabitLog(
                id=new_id(),
                habit_id=habit_id,
                date=day,
                logged_at=utc_now(),
                value=value,
                notes=notes or "",
            )
            session.add(log)
            session.flush()
            return row_to_habit_log(log)

    def delete_log(self, log_id: str) -> None:
        with self.session_factory() as session:
            log = session.get(HabitLog, log_id)
            if log:
                session.delete(log)

    # Streaks

    def qualifying_days(self, habit_id: str) -> list[str]:
        """Days that count toward the habit's streak, newest first."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return []
            target = habit.target_value if habit.target_value is not None else 1.0
            if habit.type == "BOOLEAN":
                statement = (
                    select(Completion.date)
                    .where(Completion.habit_id == habit_id)
                    .order_by(Completion.date.desc())  # type: ignore[attr-defined]
                )
            else:
                total = func.sum(HabitLog.value)
                # NUMERIC meets the goal; LIMIT was tracked and stayed under the ceiling.
                condition = total >= target if habit.type == "NUMERIC" else total < target
                statement = (
                    select(HabitLog.date)
                    .where(HabitLog.habit_id == habit_id)
                    .group_by(HabitLog.date)
                    .having(condition)
                    .order_by(HabitLog.date.desc())  # type: ignore[attr-defined]
                )
            return list(session.exec(statement).all())

    def get_streak(self, habit_id: str, *, today: date | str | None = None) -> Streak:
        """Current and longest streak; an unknown habit yields zeros."""
        current, longest = compute_streaks(self.qualifying_days(habit_id), today=today)
        return Streak(current=current, longest=longest)
