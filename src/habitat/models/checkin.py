"""Check-in tables: templates, ordered questions, daily responses and journal entries."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel


class CheckinTemplate(SQLModel, table=True):
    __tablename__: ClassVar[str] = "checkin_templates"

    id: str = Field(primary_key=True)
    title: str = Field(nullable=False)
    schedule_type: str = Field(default="DAILY", sa_column_kwargs={"server_default": "DAILY"})
    days_active: Optional[str] = Field(default=None)


class CheckinQuestion(SQLModel, table=True):
    __tablename__: ClassVar[str] = "checkin_questions"
    __table_args__ = (Index("idx_checkin_questions_template", "template_id"),)

    id: str = Field(primary_key=True)
    template_id: str = Field(foreign_key="checkin_templates.id", ondelete="CASCADE", nullable=False)
    prompt: str = Field(nullable=False)
    response_type: str = Field(default="TEXT", sa_column_kwargs={"server_default": "TEXT"})
    display_order: int = Field(default=0, sa_column_kwargs={"server_default": "0"})


class CheckinResponse(SQLModel, table=True):
    """One answer per question per calendar date."""

    __tablename__: ClassVar[str] = "checkin_responses"
    __table_args__ = (
        UniqueConstraint("question_id", "logged_date"),
        Index("idx_checkin_responses_date", "logged_date"),
        Index("idx_checkin_responses_question", "question_id"),
    )

    id: str = Field(primary_key=True)
    question_id: str = Field(foreign_key="checkin_questions.id", ondelete="CASCADE", nullable=False)
    logged_date: str = Field(nullable=False)
    value_numeric: Optional[float] = Field(default=None)
    value_text: Optional[str] = Field(default=None)


class CheckinEntry(SQLModel, table=True):
    """Free-text journal entry, unique per ``entry_date``."""

    __tablename__: ClassVar[str] = "checkin_entries"
    __table_args__ = (Index("idx_checkin_entries_date", "entry_date"),)

    id: str = Field(primary_key=True)
    entry_date: str = Field(nullable=False, unique=True)
    content: str = Field(default="", sa_column_kwargs={"server_default": ""})
    created_at: str = Field(nullable=False)
    updated_at: str = Field(nullable=False)
