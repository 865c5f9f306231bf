"""Todo repository protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..inputs import TodoCreate, TodoUpdate
from ..records import TodoRecord


@runtime_checkable
class TodoRepository(Protocol):
    """Repository for todos."""

    def list_open(self) -> list[TodoRecord]:
        """List unarchived todos."""
        ...

    def create(self, data: TodoCreate) -> TodoRecord:
        ...

    def update(self, data: TodoUpdate) -> TodoRecord:
        ...

    def delete(self, todo_id: str) -> None:
        ...

    def archive(self, todo_id: str) -> None:
        ...

    def toggle(self, todo_id: str) -> TodoRecord:
        ...

    def delete_all(self) -> None:
        ...
