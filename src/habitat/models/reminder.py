"""Reminder trigger rows attached to habits and check-in templates."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class Reminder(SQLModel, table=True):
    __tablename__: ClassVar[str] = "reminders"
    __table_args__ = (Index("idx_reminders_habit_id", "habit_id"),)

    id: str = Field(primary_key=True)
    habit_id: str = Field(foreign_key="habits.id", ondelete="CASCADE", nullable=False)
    trigger_time: str = Field(nullable=False)
    # NULL means every day.
    days_active: Optional[str] = Field(default=None)


class CheckinReminder(SQLModel, table=True):
    __tablename__: ClassVar[str] = "checkin_reminders"
    __table_args__ = (Index("idx_checkin_reminders_template", "template_id"),)

    id: str = Field(primary_key=True)
    template_id: str = Field(foreign_key="checkin_templates.id", ondelete="CASCADE", nullable=False)
    trigger_time: str = Field(nullable=False)
    days_active: Optional[str] = Field(default=None)
