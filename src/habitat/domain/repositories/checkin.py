"""Check-in repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..inputs import (
    CheckinQuestionCreate,
    CheckinQuestionUpdate,
    CheckinTemplateCreate,
    CheckinTemplateUpdate,
)
from ..records import (
    CheckinDaySummary,
    CheckinEntryRecord,
    CheckinQuestionRecord,
    CheckinResponseRecord,
    CheckinTemplateRecord,
    ResponseDateCount,
)


@runtime_checkable
class CheckinRepository(Protocol):
    """Repository for check-in templates, questions, responses and journal entries."""

    def get_entry(self, day: str) -> Optional[CheckinEntryRecord]:
        ...

    def upsert_entry(self, day: str, content: str) -> CheckinEntryRecord:
        ...

    def delete_entry(self, entry_id: str) -> None:
        ...

    def list_entries(self, start: str, end: str) -> list[CheckinEntryRecord]:
        ...

    def delete_all_entries(self) -> None:
        ...

    def list_templates(self) -> list[CheckinTemplateRecord]:
        ...

    def get_template(self, template_id: str) -> Optional[CheckinTemplateRecord]:
        ...

    def create_template(self, data: CheckinTemplateCreate) -> CheckinTemplateRecord:
        ...

    def update_template(self, data: CheckinTemplateUpdate) -> CheckinTemplateRecord:
        ...

    def delete_template(self, template_id: str) -> None:
        ...

    def delete_all(self) -> None:
        """Delete every template and, through cascades, the whole family."""
        ...

    def list_questions(self, template_id: str) -> list[CheckinQuestionRecord]:
        ...

    def create_question(self, data: CheckinQuestionCreate) -> CheckinQuestionRecord:
        ...

    def update_question(self, data: CheckinQuestionUpdate) -> CheckinQuestionRecord:
        ...

    def delete_question(self, question_id: str) -> None:
        ...

    def list_responses(self, template_id: str, day: str) -> list[CheckinResponseRecord]:
        ...

    def upsert_response(
        self,
        question_id: str,
        logged_date: str,
        value_numeric: Optional[float] = None,
        value_text: Optional[str] = None,
    ) -> CheckinResponseRecord:
        ...

    def delete_response(self, response_id: str) -> None:
        ...

    def response_dates(self) -> list[ResponseDateCount]:
        ...

    def summary_for_date(self, day: str) -> list[CheckinDaySummary]:
        ...
