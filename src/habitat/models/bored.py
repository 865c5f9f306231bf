"""Bored-list tables: categories and the activities grouped under them."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class BoredCategory(SQLModel, table=True):
    """Activity grouping; ``is_system`` rows are seeded with fixed ids and never deleted."""

    __tablename__: ClassVar[str] = "bored_categories"

    id: str = Field(primary_key=True)
    name: str = Field(nullable=False)
    icon: str = Field(default="i-heroicons-sparkles", sa_column_kwargs={"server_default": "i-heroicons-sparkles"})
    color: str = Field(default="#6366f1", sa_column_kwargs={"server_default": "#6366f1"})
    is_system: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    sort_order: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    created_at: str = Field(nullable=False)


class BoredActivity(SQLModel, table=True):
    __tablename__: ClassVar[str] = "bored_activities"
    __table_args__ = (Index("idx_bored_activities_category", "category_id"),)

    id: str = Field(primary_key=True)
    title: str = Field(nullable=False)
    description: str = Field(default="", sa_column_kwargs={"server_default": ""})
    category_id: str = Field(foreign_key="bored_categories.id", ondelete="CASCADE", nullable=False)
    estimated_minutes: Optional[int] = Field(default=None)
    tags: str = Field(default="[]", sa_column_kwargs={"server_default": "[]"})
    annotations: str = Field(default="{}", sa_column_kwargs={"server_default": "{}"})
    is_recurring: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    recurrence_rule: Optional[str] = Field(default=None)
    is_done: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    done_at: Optional[str] = Field(default=None)
    done_count: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    last_done_at: Optional[str] = Field(default=None)
    archived_at: Optional[str] = Field(default=None)
    created_at: str = Field(nullable=False)
