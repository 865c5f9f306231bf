"""SQLModel implementation of the bored list: categories, activities and the oracle."""

from __future__ import annotations

import random
from typing import Iterable, Optional

from sqlalchemy import delete
from sqlmodel import select

from ...domain.inputs import (
    BoredActivityCreate,
    BoredActivityUpdate,
    BoredCategoryCreate,
    BoredCategoryUpdate,
)
from ...domain.records import BoredActivityRecord, BoredCategoryRecord, OracleResult
from ...errors import NotFoundError
from ...models import BoredActivity, BoredCategory, Todo
from ...services.oracle import build_pool, pick
from ..clock import new_id, utc_now
from ..codec import (
    apply_changes,
    dump_flag,
    dump_json_list,
    dump_json_map,
    row_to_bored_activity,
    row_to_bored_category,
    row_to_todo,
)
from ..database import SessionFactory

_ACTIVITY_NULLABLE = frozenset({"estimated_minutes", "recurrence_rule"})


class SQLModelBoredRepository:
    """Bored categories and activities, plus the random suggestion over them."""

    def __init__(self, session_factory: SessionFactory, rng: Optional[random.Random] = None):
        self.session_factory = session_factory
        self.rng = rng

    # Categories

    def list_categories(self) -> list[BoredCategoryRecord]:
        """System categories first, then by sort order and age."""
        with self.session_factory() as session:
            rows = session.exec(
                select(BoredCategory).order_by(
                    BoredCategory.is_system.desc(),  # type: ignore[attr-defined]
                    BoredCategory.sort_order,
                    BoredCategory.created_at,
                )
            ).all()
            return [row_to_bored_category(row) for row in rows]

    def create_category(self, data: BoredCategoryCreate) -> BoredCategoryRecord:
        row = BoredCategory(
            id=new_id(),
            name=data.name,
            icon=data.icon,
            color=data.color,
            is_system=dump_flag(data.is_system),
            sort_order=data.sort_order,
            created_at=utc_now(),
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_bored_category(row)

    def update_category(self, data: BoredCategoryUpdate) -> BoredCategoryRecord:
        changes = data.model_dump(exclude_unset=True)
        category_id = changes.pop("id")
        with self.session_factory() as session:
            row = session.get(BoredCategory, category_id)
            if row is None:
                raise NotFoundError("BoredCategory", category_id)
            apply_changes(row, changes)
            session.add(row)
            session.flush()
            return row_to_bored_category(row)

    def delete_category(self, category_id: str) -> None:
        """Delete a user category with its activities; system categories stay."""
        with self.session_factory() as session:
            session.connection().execute(
                delete(BoredCategory)
                .where(BoredCategory.id == category_id)
                .where(BoredCategory.is_system == 0)
            )

    # Activities

    def list_activities(self, category_id: Optional[str] = None) -> list[BoredActivityRecord]:
        """Unarchived activities, oldest first, optionally within one category."""
        with self.session_factory() as session:
            statement = select(BoredActivity).where(
                BoredActivity.archived_at.is_(None)  # type: ignore[union-attr]
            )
            if category_id is not None:
                statement = statement.where(BoredActivity.category_id == category_id)
            rows = session.exec(statement.order_by(BoredActivity.created_at)).all()
            return [row_to_bored_activity(row) for row in rows]

    def create_activity(self, data: BoredActivityCreate) -> BoredActivityRecord:
        row = BoredActivity(
            id=new_id(),
            title=data.title,
            description=data.description,
            category_id=data.category_id,
            estimated_minutes=data.estimated_minutes,
            tags=dump_json_list(data.tags),
            annotations=dump_json_map(data.annotations),
            is_recurring=dump_flag(data.is_recurring),
            recurrence_rule=data.recurrence_rule,
            created_at=utc_now(),
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_bored_activity(row)

    def update_activity(self, data: BoredActivityUpdate) -> BoredActivityRecord:
        changes = data.model_dump(exclude_unset=True)
        activity_id = changes.pop("id")
        with self.session_factory() as session:
            row = self._require_activity(session, activity_id)
            apply_changes(row, changes, nullable=_ACTIVITY_NULLABLE)
            session.add(row)
            session.flush()
            return row_to_bored_activity(row)

    def delete_activity(self, activity_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(BoredActivity, activity_id)
            if row:
                session.delete(row)

    def archive_activity(self, activity_id: str) -> None:
        with self.session_factory() as session:
            row = self._require_activity(session, activity_id)
            row.archived_at = utc_now()
            session.add(row)

    def mark_done(self, activity_id: str) -> BoredActivityRecord:
        """Count a completion; only one-off activities are closed by it."""
        now = utc_now()
        with self.session_factory() as session:
            row = self._require_activity(session, activity_id)
            if not row.is_recurring:
                row.is_done = 1
                row.done_at = now
            row.done_count = (row.done_count or 0) + 1
            row.last_done_at = now
            session.add(row)
            session.flush()
            return row_to_bored_activity(row)

    def delete_all(self) -> None:
        """Remove every activity and every user category."""
        with self.session_factory() as session:
            conn = session.connection()
            conn.execute(delete(BoredActivity))
            conn.execute(delete(BoredCategory).where(BoredCategory.is_system == 0))

    # Oracle

    def oracle(
        self,
        excluded_category_ids: Iterable[str] = (),
        max_minutes: Optional[int] = None,
    ) -> Optional[OracleResult]:
        """One random eligible activity or bored-listed todo; None when nothing qualifies."""
        with self.session_factory() as session:
            activities = session.exec(
                select(BoredActivity)
                .where(BoredActivity.archived_at.is_(None))  # type: ignore[union-attr]
                .where((BoredActivity.is_done == 0) | (BoredActivity.is_recurring == 1))
                .order_by(BoredActivity.created_at)
            ).all()
            todos = session.exec(
                select(Todo)
                .where(Todo.show_in_bored == 1)
                .where(Todo.is_done == 0)
                .where(Todo.archived_at.is_(None))  # type: ignore[union-attr]
                .order_by(Todo.created_at)
            ).all()
            categories = session.exec(select(BoredCategory)).all()
            pool = build_pool(
                [row_to_bored_activity(row) for row in activities],
                [row_to_todo(row) for row in todos],
                {row.id: row_to_bored_category(row) for row in categories},
                excluded_category_ids=excluded_category_ids,
                max_minutes=max_minutes,
            )
        return pick(pool, self.rng)

    def _require_activity(self, session, activity_id: str) -> BoredActivity:
        row = session.get(BoredActivity, activity_id)
        if row is None:
            raise NotFoundError("BoredActivity", activity_id)
        return row
