"""SQLModel implementation of the check-in repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, func
from sqlmodel import select

from ...domain.inputs import (
    CheckinQuestionCreate,
    CheckinQuestionUpdate,
    CheckinTemplateCreate,
    CheckinTemplateUpdate,
)
from ...domain.records import (
    CheckinDaySummary,
    CheckinEntryRecord,
    CheckinQuestionRecord,
    CheckinResponseRecord,
    CheckinTemplateRecord,
    ResponseDateCount,
)
from ...errors import NotFoundError
from ...models import CheckinEntry, CheckinQuestion, CheckinResponse, CheckinTemplate
from ..clock import new_id, utc_now
from ..codec import (
    apply_changes,
    dump_optional_json,
    row_to_checkin_entry,
    row_to_checkin_question,
    row_to_checkin_response,
    row_to_checkin_template,
)
from ..database import SessionFactory


class SQLModelCheckinRepository:
    """Templates, their ordered questions, daily responses and journal entries."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    # Journal entries

    def get_entry(self, day: str) -> Optional[CheckinEntryRecord]:
        with self.session_factory() as session:
            row = session.exec(select(CheckinEntry).where(CheckinEntry.entry_date == day)).first()
            return row_to_checkin_entry(row) if row else None

    def upsert_entry(self, day: str, content: str) -> CheckinEntryRecord:
        """Replace the content of the entry for ``day``, creating it on first write."""
        now = utc_now()
        with self.session_factory() as session:
            row = session.exec(select(CheckinEntry).where(CheckinEntry.entry_date == day)).first()
            if row is None:
                row = CheckinEntry(
                    id=new_id(), entry_date=day, content=content, created_at=now, updated_at=now
                )
            else:
                row.content = content
                row.updated_at = now
            session.add(row)
            session.flush()
            return row_to_checkin_entry(row)

    def delete_entry(self, entry_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(CheckinEntry, entry_id)
            if row:
                session.delete(row)

    def list_entries(self, start: str, end: str) -> list[CheckinEntryRecord]:
        """Entries with ``start <= entry_date <= end``, newest first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinEntry)
                .where(CheckinEntry.entry_date >= start)
                .where(CheckinEntry.entry_date <= end)
                .order_by(CheckinEntry.entry_date.desc())  # type: ignore[attr-defined]
            ).all()
            return [row_to_checkin_entry(row) for row in rows]

    def delete_all_entries(self) -> None:
        with self.session_factory() as session:
            session.connection().execute(delete(CheckinEntry))

    # Templates

    def list_templates(self) -> list[CheckinTemplateRecord]:
        with self.session_factory() as session:
            rows = session.exec(select(CheckinTemplate).order_by(CheckinTemplate.title)).all()
            return [row_to_checkin_template(row) for row in rows]

    def get_template(self, template_id: str) -> Optional[CheckinTemplateRecord]:
        with self.session_factory() as session:
            row = session.get(CheckinTemplate, template_id)
            return row_to_checkin_template(row) if row else None

    def create_template(self, data: CheckinTemplateCreate) -> CheckinTemplateRecord:
        row = CheckinTemplate(
            id=new_id(),
            title=data.title,
            schedule_type=data.schedule_type,
            days_active=dump_optional_json(data.days_active),
        )
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_checkin_template(row)

    def update_template(self, data: CheckinTemplateUpdate) -> CheckinTemplateRecord:
        changes = data.model_dump(exclude_unset=True)
        template_id = changes.pop("id")
        with self.session_factory() as session:
            row = session.get(CheckinTemplate, template_id)
            if row is None:
                raise NotFoundError("CheckinTemplate", template_id)
            apply_changes(row, changes)
            session.add(row)
            session.flush()
            return row_to_checkin_template(row)

    def delete_template(self, template_id: str) -> None:
        """Questions, their responses and the template's reminders cascade."""
        with self.session_factory() as session:
            row = session.get(CheckinTemplate, template_id)
            if row:
                session.delete(row)

    def delete_all(self) -> None:
        """Drop every template; everything else in the family cascades from them."""
        with self.session_factory() as session:
            session.connection().execute(delete(CheckinTemplate))

    # Questions

    def list_questions(self, template_id: str) -> list[CheckinQuestionRecord]:
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinQuestion)
                .where(CheckinQuestion.template_id == template_id)
                .order_by(CheckinQuestion.display_order)
            ).all()
            return [row_to_checkin_question(row) for row in rows]

    def create_question(self, data: CheckinQuestionCreate) -> CheckinQuestionRecord:
        row = CheckinQuestion(id=new_id(), **data.model_dump())
        with self.session_factory() as session:
            session.add(row)
            session.flush()
            return row_to_checkin_question(row)

    def update_question(self, data: CheckinQuestionUpdate) -> CheckinQuestionRecord:
        changes = data.model_dump(exclude_unset=True)
        question_id = changes.pop("id")
        with self.session_factory() as session:
            row = session.get(CheckinQuestion, question_id)
            if row is None:
                raise NotFoundError("CheckinQuestion", question_id)
            apply_changes(row, changes)
            session.add(row)
            session.flush()
            return row_to_checkin_question(row)

    def delete_question(self, question_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(CheckinQuestion, question_id)
            if row:
                session.delete(row)

    # Responses

    def list_responses(self, template_id: str, day: str) -> list[CheckinResponseRecord]:
        """Answers to one template on one date, in question display order."""
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinResponse)
                .join(CheckinQuestion, CheckinQuestion.id == CheckinResponse.question_id)
                .where(CheckinQuestion.template_id == template_id)
                .where(CheckinResponse.logged_date == day)
                .order_by(CheckinQuestion.display_order)
            ).all()
            return [row_to_checkin_response(row) for row in rows]

    def upsert_response(
        self,
        question_id: str,
        logged_date: str,
        value_numeric: Optional[float] = None,
        value_text: Optional[str] = None,
    ) -> CheckinResponseRecord:
        """Overwrite both values of the (question, date) answer, or create it."""
        with self.session_factory() as session:
            row = session.exec(
                select(CheckinResponse)
                .where(CheckinResponse.question_id == question_id)
                .where(CheckinResponse.logged_date == logged_date)
            ).first()
            if row is None:
                row = CheckinResponse(id=new_id(), question_id=question_id, logged_date=logged_date)
            row.value_numeric = value_numeric
            row.value_text = value_text
            session.add(row)
            session.flush()
            return row_to_checkin_response(row)

    def delete_response(self, response_id: str) -> None:
        with self.session_factory() as session:
            row = session.get(CheckinResponse, response_id)
            if row:
                session.delete(row)

    def response_dates(self) -> list[ResponseDateCount]:
        """Every date with at least one answer and how many answers it has, newest first."""
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinResponse.logged_date, func.count())
                .group_by(CheckinResponse.logged_date)
                .order_by(CheckinResponse.logged_date.desc())  # type: ignore[attr-defined]
            ).all()
            return [ResponseDateCount(date=day, count=count) for day, count in rows]

    def summary_for_date(self, day: str) -> list[CheckinDaySummary]:
        """Templates answered on ``day`` with their answer counts, by title."""
        with self.session_factory() as session:
            rows = session.exec(
                select(CheckinTemplate.id, CheckinTemplate.title, func.count(CheckinResponse.id))
                .join(CheckinQuestion, CheckinQuestion.template_id == CheckinTemplate.id)
                .join(CheckinResponse, CheckinResponse.question_id == CheckinQuestion.id)
                .where(CheckinResponse.logged_date == day)
                .group_by(CheckinTemplate.id, CheckinTemplate.title)
                .order_by(CheckinTemplate.title)
            ).all()
            return [
                CheckinDaySummary(template_id=template_id, title=title, response_count=count)
                for template_id, title, count in rows
            ]
