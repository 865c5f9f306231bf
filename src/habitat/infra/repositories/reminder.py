"""SQLModel implementation of habit and check-in reminders."""

from __future__ import annotations

from sqlmodel import select

from ...domain.inputs import CheckinReminderCreate, ReminderCreate
from ...domain.records import CheckinReminderRecord, ReminderRecord
from ...models import CheckinReminder, Reminder
from ..clock import new_id
from ..codec import dump_optional_json, row_to_checkin_reminder, row_to_reminder
from ..database import SessionFactory


class SQLModelReminderRepository:
    """Trigger times attached to habits or to check-in templates, earliest first."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_all(self) -> list[ReminderRecord]:
        with self.session_factory() as session:
            rows = session.exec(select(Reminder).order_by(Reminder.trigger_time)).all()
            return [row_to_reminder(row) for row in rows]

    def list_for_habit(self, habit_id: str) -> list[ReminderRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(Reminder)
                .where(Reminder.habit_id == habit_id)
                .order_by(Reminder.trigger_time)
            ).all()
            return [row_to_reminder(row) for row in rows]

    def create(self, data: ReminderCreate) -> ReminderRecord:
        row = Reminder(
            id=new_id(),
            habit_id=data.habit_id,
            trigger_time=data.trigger_time,
            days_active=dump_optional_json(data.days_active),
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_reminder(row)

    def delete(self, reminder_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(Reminder, reminder_id)
            if row:
                session.delete(row)

    # Check-in reminders

    def list_all_checkin(self) -> list[CheckinReminderRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinReminder).order_by(CheckinReminder.trigger_time)
            ).all()
            return [row_to_checkin_reminder(row) for row in rows]

    def list_for_template(self, template_id: str) -> list[CheckinReminderRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinReminder)
                .where(CheckinReminder.template_id == template_id)
                .order_by(CheckinReminder.trigger_time)
            ).all()
            return [row_to_checkin_reminder(row) for row in rows]

    def create_checkin(self, data: CheckinReminderCreate) -> CheckinReminderRecord:
        row = CheckinReminder(
            id=new_id(),
            template_id=data.template_id,
            trigger_time=data.trigger_time,
            days_active=dump_optional_json(data.days_active),
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_checkin_reminder(row)

    def delete_checkin(self, reminder_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(CheckinReminder, reminder_id)
            if row:
                session.delete(row)
