"""Free-form notes."""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class Scribble(SQLModel, table=True):
    __tablename__: ClassVar[str] = "scribbles"
    __table_args__ = (Index("idx_scribbles_updated", "updated_at"),)

    id: str = Field(primary_key=True)
    title: str = Field(default="", sa_column_kwargs={"server_default": ""})
    content: str = Field(default="", sa_column_kwargs={"server_default": ""})
    tags: str = Field(default="[]", sa_column_kwargs={"server_default": "[]"})
    annotations: str = Field(default="{}", sa_column_kwargs={"server_default": "{}"})
    created_at: str = Field(nullable=False)
    updated_at: str = Field(nullable=False)
