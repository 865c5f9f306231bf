"""Tests for schema creation, forward-only migrations and introspection."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect

from habitat.errors import SchemaError
from habitat.infra import schema
from habitat.infra.database import create_session_factory
from habitat.store import build_store

EXPECTED_TABLES = {
    "applied_defaults",
    "bored_activities",
    "bored_categories",
    "checkin_entries",
    "checkin_questions",
    "checkin_reminders",
    "checkin_responses",
    "checkin_templates",
    "completions",
    "habit_logs",
    "habit_schedules",
    "habits",
    "reminders",
    "scribbles",
    "todos",
}


class TestFreshDatabase:
    def test_fresh_database_is_stamped_at_baseline(self, store):
        assert store.schema_version == schema.BASELINE_VERSION
        assert schema.get_user_version(store.engine) == schema.BASELINE_VERSION

    def test_every_table_exists(self, store):
        assert EXPECTED_TABLES <= set(inspect(store.engine).get_table_names())

    def test_pragmas_are_applied_per_connection(self, store):
        with store.engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
            assert conn.exec_driver_sql("PRAGMA journal_mode").scalar() == "wal"

    def test_reopening_is_idempotent(self, db_engine, store):
        """A second initialisation neither migrates nor changes the version."""
        again = build_store(db_engine)
        assert again.schema_version == schema.BASELINE_VERSION


class TestMigrations:
    def test_older_database_climbs_the_ladder(self, db_engine):
        schema.ensure_schema(db_engine)
        with db_engine.begin() as conn:
            conn.exec_driver_sql("PRAGMA user_version = 10")

        version = schema.apply_migrations(db_engine)

        assert version == 11
        assert schema.get_user_version(db_engine) == 11

    def test_each_step_runs_once(self, db_engine):
        schema.ensure_schema(db_engine)
        with db_engine.begin() as conn:
            conn.exec_driver_sql("PRAGMA user_version = 11")
        ladder = {
            12: ["CREATE TABLE extra_a (id TEXT PRIMARY KEY)"],
            13: ["CREATE TABLE extra_b (id TEXT PRIMARY KEY)"],
        }

        assert schema.apply_migrations(db_engine, ladder) == 13
        # Re-running would fail on CREATE TABLE if a step were repeated.
        assert schema.apply_migrations(db_engine, ladder) == 13

    def test_failed_step_rolls_back_with_its_version(self, db_engine):
        schema.ensure_schema(db_engine)
        with db_engine.begin() as conn:
            conn.exec_driver_sql("PRAGMA user_version = 11")
        ladder = {
            12: [
                "CREATE TABLE half_done (id TEXT PRIMARY KEY)",
                "THIS IS NOT SQL",
            ]
        }

        with pytest.raises(SchemaError):
            schema.apply_migrations(db_engine, ladder)

        assert schema.get_user_version(db_engine) == 11
        assert "half_done" not in inspect(db_engine).get_table_names()

    def test_initialize_storage_returns_version(self, db_engine):
        factory = create_session_factory(db_engine)
        assert schema.initialize_storage(db_engine, factory) == schema.BASELINE_VERSION


class TestIntrospection:
    def test_db_info_lists_tables_and_indices(self, store):
        info = store.db_info()

        assert info.user_version == schema.BASELINE_VERSION
        assert EXPECTED_TABLES <= {table.name for table in info.tables}
        index_names = {index.name for index in info.indices}
        assert "idx_completions_date" in index_names
        assert "idx_todos_due_date" in index_names
        assert all(index.sql for index in info.indices)

    def test_integrity_check_on_healthy_file(self, store):
        assert store.integrity_check() == ["ok"]
