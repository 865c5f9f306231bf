"""Scribble repository protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..inputs import ScribbleCreate, ScribbleUpdate
from ..records import ScribbleRecord


@runtime_checkable
class ScribbleRepository(Protocol):
    """Repository for free-form notes."""

    def list_all(self) -> list[ScribbleRecord]:
        ...

    def list_for_date(self, day: str) -> list[ScribbleRecord]:
        ...

    def create(self, data: ScribbleCreate) -> ScribbleRecord:
        ...

    def update(self, data: ScribbleUpdate) -> ScribbleRecord:
        ...

    def delete(self, scribble_id: str) -> None:
        ...

    def delete_all(self) -> None:
        ...
