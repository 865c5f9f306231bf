"""Schema management: idempotent DDL, forward-only migrations and introspection.

The schema version lives in SQLite's ``PRAGMA user_version``. New databases
are created at the latest shape by :func:`ensure_schema` and stamped straight
to :data:`BASELINE_VERSION`; only databases created by older builds climb the
migration ladder.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from ..domain.records import DbInfo, IndexInfo, TableInfo
from ..errors import SchemaError
from ..logging_config import get_logger

logger = get_logger("schema")

BASELINE_VERSION = 11

# Keyed by the version each step upgrades *to*. Statements must be safe to run
# against a database that ensure_schema has already brought up to date.
MIGRATIONS: dict[int, list[str]] = {
    11: [
        """CREATE TABLE IF NOT EXISTS bored_categories (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            icon TEXT NOT NULL DEFAULT 'i-heroicons-sparkles',
            color TEXT NOT NULL DEFAULT '#6366f1',
            is_system INTEGER NOT NULL DEFAULT 0,
            sort_order INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        )""",
        """CREATE TABLE IF NOT EXISTS bored_activities (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            category_id TEXT NOT NULL REFERENCES bored_categories(id) ON DELETE CASCADE,
            estimated_minutes INTEGER,
            tags TEXT NOT NULL DEFAULT '[]',
            annotations TEXT NOT NULL DEFAULT '{}',
            is_recurring INTEGER NOT NULL DEFAULT 0,
            recurrence_rule TEXT,
            is_done INTEGER NOT NULL DEFAULT 0,
            done_at TEXT,
            done_count INTEGER NOT NULL DEFAULT 0,
            last_done_at TEXT,
            archived_at TEXT,
            created_at TEXT NOT NULL
        )""",
        "CREATE INDEX IF NOT EXISTS idx_bored_activities_category ON bored_activities(category_id)",
        """CREATE TABLE IF NOT EXISTS todos (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            due_date TEXT,
            priority TEXT NOT NULL DEFAULT 'medium',
            estimated_minutes INTEGER,
            is_done INTEGER NOT NULL DEFAULT 0,
            done_at TEXT,
            done_count INTEGER NOT NULL DEFAULT 0,
            last_done_at TEXT,
            tags TEXT NOT NULL DEFAULT '[]',
            annotations TEXT NOT NULL DEFAULT '{}',
            is_recurring INTEGER NOT NULL DEFAULT 0,
            recurrence_rule TEXT,
            show_in_bored INTEGER NOT NULL DEFAULT 0,
            bored_category_id TEXT REFERENCES bored_categories(id) ON DELETE SET NULL,
            archived_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )""",
        "CREATE INDEX IF NOT EXISTS idx_todos_due_date ON todos(due_date)",
        "CREATE INDEX IF NOT EXISTS idx_todos_is_done ON todos(is_done)",
    ],
}


def ensure_schema(engine: Engine) -> None:
    """Create every table and index that does not exist yet."""

    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    try:
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise SchemaError(f"Schema creation failed: {exc}") from exc


def get_user_version(engine: Engine) -> int:
    with engine.connect() as conn:
        return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def apply_migrations(
    engine: Engine,
    migrations: Mapping[int, Sequence[str]] | None = None,
    baseline: int = BASELINE_VERSION,
) -> int:
    """Run each registered migration above the stored version, once, in order.

    Each version's statements and its ``user_version`` bump commit together.
    Returns the resulting schema version.
    """

    ladder = MIGRATIONS if migrations is None else migrations
    try:
        version = get_user_version(engine)
    except SQLAlchemyError as exc:
        raise SchemaError(f"Could not read schema version: {exc}") from exc

    while version + 1 in ladder:
        target = version + 1
        try:
            with engine.begin() as conn:
                for statement in ladder[target]:
                    conn.exec_driver_sql(statement)
                conn.exec_driver_sql(f"PRAGMA user_version = {int(target)}")
        except SQLAlchemyError as exc:
            raise SchemaError(f"Migration to version {target} failed: {exc}") from exc
        logger.info("Applied schema migration", extra={"schema_version": target})
        version = target

    if version == 0:
        # Fresh database: ensure_schema already produced the latest shape.
        with engine.begin() as conn:
            conn.exec_driver_sql(f"PRAGMA user_version = {int(baseline)}")
        logger.info("Stamped new database at baseline", extra={"schema_version": baseline})
        version = baseline
    return version


def get_db_info(engine: Engine) -> DbInfo:
    """Schema version plus the stored DDL of every table and explicit index."""

    with engine.connect() as conn:
        version = int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)
        tables = conn.exec_driver_sql(
            "SELECT name, sql FROM sqlite_master WHERE type = 'table' ORDER BY name"
        ).all()
        indices = conn.exec_driver_sql(
            "SELECT name, tbl_name, sql FROM sqlite_master "
            "WHERE type = 'index' AND sql IS NOT NULL ORDER BY tbl_name, name"
        ).all()
    return DbInfo(
        user_version=version,
        tables=[TableInfo(name=str(name), sql=str(sql or "")) for name, sql in tables],
        indices=[
            IndexInfo(name=str(name), tbl_name=str(tbl_name), sql=str(sql or ""))
            for name, tbl_name, sql in indices
        ],
    )


def integrity_check(engine: Engine) -> list[str]:
    """Return ``["ok"]`` for a healthy file, otherwise one message per problem."""

    with engine.connect() as conn:
        return [str(row[0]) for row in conn.exec_driver_sql("PRAGMA integrity_check").all()]


def initialize_storage(engine: Engine, session_factory) -> int:
    """Startup sequence shared by both backends: schema, migrations, then seeds."""

    from .seeds import apply_default_seeds

    ensure_schema(engine)
    version = apply_migrations(engine)
    applied = apply_default_seeds(session_factory)
    logger.info(
        "Storage initialized",
        extra={"schema_version": version, "seeds_applied": applied},
    )
    return version
