"""SQLModel implementation of the todo repository."""

from __future__ import annotations

from sqlalchemy import delete
from sqlmodel import select

from ...domain.inputs import TodoCreate, TodoUpdate
from ...domain.records import TodoRecord
from ...errors import NotFoundError
from ...models import Todo
from ...services.recurrence import next_due
from ..clock import new_id, utc_now
from ..codec import apply_changes, dump_flag, dump_json_list, dump_json_map, row_to_todo
from ..database import SessionFactory

_TODO_NULLABLE = frozenset({"due_date", "estimated_minutes", "recurrence_rule", "bored_category_id"})


class SQLModelTodoRepository:
    """SQLModel-based todo repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_open(self) -> list[TodoRecord]:
        """Unarchived todos, done or not, oldest first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Todo)
                .where(Todo.archived_at.is_(None))  # type: ignore[union-attr]
                .order_by(Todo.created_at)
            ).all()
            return [row_to_todo(row) for row in rows]

    def create(self, data: TodoCreate) -> TodoRecord:
        now = utc_now()
        row = Todo(
            id=new_id(),
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            estimated_minutes=data.estimated_minutes,
            tags=dump_json_list(data.tags),
            annotations=dump_json_map(data.annotations),
            is_recurring=dump_flag(data.is_recurring),
            recurrence_rule=data.recurrence_rule,
            show_in_bored=dump_flag(data.show_in_bored),
            bored_category_id=data.bored_category_id,
            created_at=now,
            updated_at=now,
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_todo(row)

    def update(self, data: TodoUpdate) -> TodoRecord:
        """Partial update; ``updated_at`` moves only when a field was sent."""
        changes = data.model_dump(exclude_unset=True)
        todo_id = changes.pop("id")
        with self.session_factory() as session:
            row = self._require(session, todo_id)
            if changes:
                apply_changes(row, changes, nullable=_TODO_NULLABLE)
                row.updated_at = utc_now()
                session.add(row)
                session.flush()
            return row_to_todo(row)

    def delete(self, todo_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(Todo, todo_id)
            if row:
                session.delete(row)

    def archive(self, todo_id: str) -> None:
        now = utc_now()
        with self.session_factory() as session:
            row = self._require(session, todo_id)
            row.archived_at = now
            row.updated_at = now
            session.add(row)

    def toggle(self, todo_id: str) -> TodoRecord:
        """Complete, advance or reopen a todo.

        An open recurring todo with a due date moves to its next occurrence
        and stays open. Any other open todo is closed. A closed todo reopens.
        """
        now = utc_now()
        with self.session_factory() as session:
            row = self._require(session, todo_id)
            if not row.is_done and row.is_recurring and row.due_date:
                row.due_date = next_due(row.due_date, row.recurrence_rule)
                row.done_count = (row.done_count or 0) + 1
                row.last_done_at = now
            elif not row.is_done:
                row.is_done = 1
                row.done_at = now
                row.done_count = (row.done_count or 0) + 1
                row.last_done_at = now
            else:
                row.is_done = 0
                row.done_at = None
            row.updated_at = now
            session.add(row)
            session.flush()
            return row_to_todo(row)

    def delete_all(self) -> None:
        with self.session_factory() as session:
            session.connection().execute(delete(Todo))

    def _require(self, session, todo_id: str) -> Todo:
        row = session.get(Todo, todo_id)
        if row is None:
            raise NotFoundError("Todo", todo_id)
        return row
