"""Bored-list repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from ..inputs import (
    BoredActivityCreate,
    BoredActivityUpdate,
    BoredCategoryCreate,
    BoredCategoryUpdate,
)
from ..records import BoredActivityRecord, BoredCategoryRecord, OracleResult


@runtime_checkable
class BoredRepository(Protocol):
    """Repository for bored categories, activities and the suggestion oracle."""

    def list_categories(self) -> list[BoredCategoryRecord]:
        ...

    def create_category(self, data: BoredCategoryCreate) -> BoredCategoryRecord:
        ...

    def update_category(self, data: BoredCategoryUpdate) -> BoredCategoryRecord:
        ...

    def delete_category(self, category_id: str) -> None:
        ...

    def list_activities(self, category_id: Optional[str] = None) -> list[BoredActivityRecord]:
        ...

    def create_activity(self, data: BoredActivityCreate) -> BoredActivityRecord:
        ...

    def update_activity(self, data: BoredActivityUpdate) -> BoredActivityRecord:
        ...

    def delete_activity(self, activity_id: str) -> None:
        ...

    def archive_activity(self, activity_id: str) -> None:
        ...

    def mark_done(self, activity_id: str) -> BoredActivityRecord:
        ...

    def delete_all(self) -> None:
        ...

    def oracle(
        self,
        excluded_category_ids: Iterable[str] = (),
        max_minutes: Optional[int] = None,
    ) -> Optional[OracleResult]:
        """Pick one random suggestion."""
        ...
