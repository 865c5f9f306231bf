"""Pytest configuration and shared fixtures for Habitat tests.

Every test gets its own SQLite file under ``tmp_path`` so WAL mode, the
sidecar lock file and file deletion behave as they do on a device.
"""

from __future__ import annotations

import random
from datetime import date, timedelta

import pytest

from habitat.config import TestingConfig
from habitat.domain.inputs import (
    BoredActivityCreate,
    BoredCategoryCreate,
    CheckinQuestionCreate,
    CheckinTemplateCreate,
    HabitCreate,
    TodoCreate,
)
from habitat.infra import clock
from habitat.infra.database import create_engine_for_path
from habitat.store import build_store

# =============================================================================
# Configuration and database fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Testing configuration rooted in a per-test data directory.

    Returns:
        TestingConfig: configuration with ``DATA_DIR`` under ``tmp_path``
    """
    monkeypatch.setenv("HABITAT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("HABITAT_DATABASE_URL", raising=False)
    monkeypatch.delenv("HABITAT_BACKEND", raising=False)
    monkeypatch.setenv("HABITAT_DEV_MODE", "false")
    return TestingConfig()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "habitat.db"


@pytest.fixture
def db_engine(db_path):
    """Engine on a fresh SQLite file with the production pragmas installed.

    Yields:
        Engine: SQLAlchemy engine, disposed after the test
    """
    engine = create_engine_for_path(db_path)
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    """Fully initialised store: schema, migrations and seeds applied.

    The oracle draws from a seeded RNG so suggestions are repeatable.
    """
    habitat_store = build_store(db_engine, rng=random.Random(1234))
    yield habitat_store
    habitat_store.close()


@pytest.fixture
def session_factory(store):
    return store.session_factory


@pytest.fixture
def today() -> str:
    """The UTC calendar day streaks are anchored on."""
    return clock.today()


@pytest.fixture
def days_ago():
    """Return ``YYYY-MM-DD`` for ``n`` days before ``anchor`` (today by default)."""

    def _days_ago(n: int, anchor: date | None = None) -> str:
        return ((anchor or clock.parse_day(clock.today())) - timedelta(days=n)).isoformat()

    return _days_ago


# =============================================================================
# Test data factories
# =============================================================================


@pytest.fixture
def habit_factory(store):
    """Factory for creating habits through the repository.

    Returns:
        Callable: Function that creates and returns HabitWithSchedule records
    """

    def _create_habit(name: str = "Drink water", **fields):
        """Create a habit with sensible defaults.

        Args:
            name: Habit display name
            **fields: Any other HabitCreate field (type, target_value, tags...)
        """
        return store.habit_repo.create(HabitCreate(name=name, **fields))

    return _create_habit


@pytest.fixture
def template_factory(store):
    """Factory for check-in templates with optional questions."""

    def _create_template(title: str = "Daily mood", prompts: tuple[str, ...] = ()):
        template = store.checkin_repo.create_template(CheckinTemplateCreate(title=title))
        for order, prompt in enumerate(prompts):
            store.checkin_repo.create_question(
                CheckinQuestionCreate(template_id=template.id, prompt=prompt, display_order=order)
            )
        return template

    return _create_template


@pytest.fixture
def category_factory(store):
    def _create_category(name: str = "Outdoors", **fields):
        return store.bored_repo.create_category(BoredCategoryCreate(name=name, **fields))

    return _create_category


@pytest.fixture
def activity_factory(store, category_factory):
    """Factory for bored activities; creates a user category when none is given."""

    def _create_activity(title: str = "Go for a run", category_id: str | None = None, **fields):
        if category_id is None:
            category_id = category_factory().id
        return store.bored_repo.create_activity(
            BoredActivityCreate(title=title, category_id=category_id, **fields)
        )

    return _create_activity


@pytest.fixture
def todo_factory(store):
    def _create_todo(title: str = "File taxes", **fields):
        return store.todo_repo.create(TodoCreate(title=title, **fields))

    return _create_todo
