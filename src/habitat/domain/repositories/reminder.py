"""Reminder repository protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..inputs import CheckinReminderCreate, ReminderCreate
from ..records import CheckinReminderRecord, ReminderRecord


@runtime_checkable
class ReminderRepository(Protocol):
    """Repository for habit reminders and check-in reminders."""

    def list_all(self) -> list[ReminderRecord]:
        ...

    def list_for_habit(self, habit_id: str) -> list[ReminderRecord]:
        ...

    def create(self, data: ReminderCreate) -> ReminderRecord:
        ...

    def delete(self, reminder_id: str) -> None:
        ...

    def list_all_checkin(self) -> list[CheckinReminderRecord]:
        ...

    def list_for_template(self, template_id: str) -> list[CheckinReminderRecord]:
        ...

    def create_checkin(self, data: CheckinReminderCreate) -> CheckinReminderRecord:
        ...

    def delete_checkin(self, reminder_id: str) -> None:
        ...
