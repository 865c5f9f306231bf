"""Random "I'm bored" suggestion drawn from activities and flagged todos."""

from __future__ import annotations

import random
from typing import Iterable, Mapping, Optional

from ..domain.records import (
    ActivitySuggestion,
    BoredActivityRecord,
    BoredCategoryRecord,
    OracleResult,
    TodoRecord,
    TodoSuggestion,
)


def _fits(minutes: Optional[int], max_minutes: Optional[int]) -> bool:
    return max_minutes is None or minutes is None or minutes <= max_minutes


def build_pool(
    activities: Iterable[BoredActivityRecord],
    todos: Iterable[TodoRecord],
    categories: Mapping[str, BoredCategoryRecord],
    excluded_category_ids: Iterable[str] = (),
    max_minutes: Optional[int] = None,
) -> list[OracleResult]:
    """Eligible candidates, activities first, then todos.

    Activities must be unarchived and either still open or recurring, and
    must belong to an existing category. Todos must be flagged for the bored
    list, open and unarchived. Both honour the exclusions and the time ceiling.
    """

    excluded = set(excluded_category_ids)
    pool: list[OracleResult] = []
    for activity in activities:
        if activity.archived_at is not None:
            continue
        if activity.is_done and not activity.is_recurring:
            continue
        if activity.category_id in excluded or not _fits(activity.estimated_minutes, max_minutes):
            continue
        category = categories.get(activity.category_id)
        if category is not None:
            pool.append(ActivitySuggestion(activity=activity, category=category))
    for todo in todos:
        if not todo.show_in_bored or todo.is_done or todo.archived_at is not None:
            continue
        if todo.bored_category_id and todo.bored_category_id in excluded:
            continue
        if not _fits(todo.estimated_minutes, max_minutes):
            continue
        category = categories.get(todo.bored_category_id) if todo.bored_category_id else None
        pool.append(TodoSuggestion(todo=todo, category=category))
    return pool


def pick(pool: list[OracleResult], rng: Optional[random.Random] = None) -> Optional[OracleResult]:
    """Uniform choice from ``pool``; None when it is empty."""

    if not pool:
        return None
    chooser = rng if rng is not None else random
    return pool[chooser.randrange(len(pool))]
