"""Seed idempotency ledger."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import Field, SQLModel


class AppliedDefault(SQLModel, table=True):
    """Marks a named seed as applied; survives deletion of the seeded rows."""

    __tablename__: ClassVar[str] = "applied_defaults"

    key: str = Field(primary_key=True)
    applied_at: str = Field(nullable=False)
