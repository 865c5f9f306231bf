"""SQLModel implementation of the scribble repository."""

from __future__ import annotations

from sqlalchemy import delete
from sqlmodel import select

from ...domain.inputs import ScribbleCreate, ScribbleUpdate
from ...domain.records import ScribbleRecord
from ...errors import NotFoundError
from ...models import Scribble
from ..clock import new_id, utc_now
from ..codec import apply_changes, dump_json_list, dump_json_map, row_to_scribble
from ..database import SessionFactory


class SQLModelScribbleRepository:
    """SQLModel-based scribble repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_all(self) -> list[ScribbleRecord]:
        """All notes, most recently edited first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Scribble).order_by(Scribble.updated_at.desc())  # type: ignore[attr-defined]
            ).all()
            return [row_to_scribble(row) for row in rows]

    def list_for_date(self, day: str) -> list[ScribbleRecord]:
        """Notes last edited on ``day`` (UTC), most recent first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(Scribble)
                .where(Scribble.updated_at.like(f"{day}%"))  # type: ignore[attr-defined]
                .order_by(Scribble.updated_at.desc())  # type: ignore[attr-defined]
            ).all()
            return [row_to_scribble(row) for row in rows]

    def create(self, data: ScribbleCreate) -> ScribbleRecord:
        now = utc_now()
        row = Scribble(
            id=new_id(),
            title=data.title,
            content=data.content,
            tags=dump_json_list(data.tags),
            annotations=dump_json_map(data.annotations),
            created_at=now,
            updated_at=now,
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_scribble(row)

    def update(self, data: ScribbleUpdate) -> ScribbleRecord:
        """Partial update; ``updated_at`` moves even when no field changed."""
        changes = data.model_dump(exclude_unset=True)
        scribble_id = changes.pop("id")
        with self.session_factory() as session:
            row = session.get(Scribble, scribble_id)
            if row is None:
                raise NotFoundError("Scribble", scribble_id)
            for key in ("title", "content"):
                if key in changes and changes[key] is None:
                    changes[key] = ""
            apply_changes(row, changes)
            row.updated_at = utc_now()
            session.add(row)
            session.flush()
            return row_to_scribble(row)

    def delete(self, scribble_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(Scribble, scribble_id)
            if row:
                session.delete(row)

    def delete_all(self) -> None:
        with self.session_factory() as session:
            session.connection().execute(delete(Scribble))
