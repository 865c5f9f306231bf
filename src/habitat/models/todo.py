"""Todo table."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class Todo(SQLModel, table=True):
    """A task; recurring todos advance ``due_date`` instead of closing."""

    __tablename__: ClassVar[str] = "todos"
    __table_args__ = (
        Index("idx_todos_due_date", "due_date"),
        Index("idx_todos_is_done", "is_done"),
    )

    id: str = Field(primary_key=True)
    title: str = Field(nullable=False)
    description: str = Field(default="", sa_column_kwargs={"server_default": ""})
    due_date: Optional[str] = Field(default=None)
    priority: str = Field(default="medium", sa_column_kwargs={"server_default": "medium"})
    estimated_minutes: Optional[int] = Field(default=None)
    is_done: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    done_at: Optional[str] = Field(default=None)
    done_count: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    last_done_at: Optional[str] = Field(default=None)
    tags: str = Field(default="[]", sa_column_kwargs={"server_default": "[]"})
    annotations: str = Field(default="{}", sa_column_kwargs={"server_default": "{}"})
    is_recurring: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    recurrence_rule: Optional[str] = Field(default=None)
    show_in_bored: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    bored_category_id: Optional[str] = Field(
        default=None, foreign_key="bored_categories.id", ondelete="SET NULL"
    )
    archived_at: Optional[str] = Field(default=None)
    created_at: str = Field(nullable=False)
    updated_at: str = Field(nullable=False)
