"""Database infrastructure: engine construction, pragmas and session scopes."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Callable, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from ..config import BaseConfig

SessionFactory = Callable[[], AbstractContextManager[Session]]


def _install_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    """Apply connection-level PRAGMAs and take over transaction demarcation.

    pysqlite only opens a transaction implicitly before DML, so DDL in a
    migration and ``PRAGMA user_version`` would otherwise autocommit. Disabling
    the driver's own handling and emitting BEGIN ourselves makes every
    SQLAlchemy transaction span all of its statements.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name} = {value}")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine_options = config.sqlalchemy_engine_options()
    engine = create_engine(config.DATABASE_URL, **engine_options)
    _install_pragmas(engine, dict(config.SQLITE_PRAGMAS))
    return engine


def create_engine_for_path(path, *, journal_mode: str = "wal") -> Engine:
    """Engine for an explicit SQLite file path (CLI overrides and tests)."""

    engine = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
    _install_pragmas(engine, {"journal_mode": journal_mode, "foreign_keys": "on"})
    return engine


@contextmanager
def session_scope(engine) -> Iterator[Session]:
    """Provide a transactional scope around operations."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine) -> SessionFactory:
    """Create a session factory: each call opens one commit-or-rollback unit of work."""

    def factory() -> AbstractContextManager[Session]:
        return session_scope(engine)

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Engine + session factory with schema, migrations and seeds applied.

    Returns (engine, session_factory).
    """
    from .schema import initialize_storage

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    session_factory = create_session_factory(engine)
    initialize_storage(engine, session_factory)
    return engine, session_factory


def serialize_database(engine: Engine) -> bytes:
    """Byte image of the main database, with the WAL folded in first."""

    raw = engine.raw_connection()
    try:
        driver = raw.driver_connection
        driver.execute("PRAGMA wal_checkpoint(TRUNCATE)")
        return driver.serialize()
    finally:
        raw.close()
