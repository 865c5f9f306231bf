"""The single data-layer handle: one engine plus the repositories bound to it."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.records import DbInfo
from .domain.repositories import (
    BoredRepository,
    CheckinRepository,
    DefaultsRepository,
    HabitRepository,
    ReminderRepository,
    ScribbleRepository,
    TodoRepository,
)
from .infra import schema
from .infra.database import (
    SessionFactory,
    create_db_engine,
    create_engine_for_path,
    create_session_factory,
)
from .infra.repositories import (
    SQLModelBoredRepository,
    SQLModelCheckinRepository,
    SQLModelDefaultsRepository,
    SQLModelHabitRepository,
    SQLModelReminderRepository,
    SQLModelScribbleRepository,
    SQLModelTodoRepository,
)
from .logging_config import get_logger
from .services.snapshot import ExportSelection, SnapshotBundle, export_snapshot, import_snapshot

logger = get_logger("store")


@dataclass
class HabitatStore:
    """Owns the engine for one database file; constructed once per process."""

    engine: Engine
    session_factory: SessionFactory

    habit_repo: HabitRepository
    checkin_repo: CheckinRepository
    scribble_repo: ScribbleRepository
    reminder_repo: ReminderRepository
    bored_repo: BoredRepository
    todo_repo: TodoRepository
    defaults_repo: DefaultsRepository

    schema_version: int = 0

    def db_info(self) -> DbInfo:
        return schema.get_db_info(self.engine)

    def integrity_check(self) -> list[str]:
        return schema.integrity_check(self.engine)

    def export_json(self, selection: ExportSelection | Mapping[str, bool] | None = None) -> SnapshotBundle:
        return export_snapshot(self.session_factory, selection)

    def import_json(self, bundle: SnapshotBundle | Mapping[str, Any]) -> None:
        import_snapshot(self.session_factory, bundle)

    def close(self) -> None:
        self.engine.dispose()


def build_store(
    engine: Engine,
    *,
    rng: Optional[random.Random] = None,
    initialize: bool = True,
) -> HabitatStore:
    """Wire repositories onto ``engine``; run schema, migrations and seeds first by default."""

    session_factory = create_session_factory(engine)
    version = schema.initialize_storage(engine, session_factory) if initialize else 0
    return HabitatStore(
        engine=engine,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory),
        checkin_repo=SQLModelCheckinRepository(session_factory),
        scribble_repo=SQLModelScribbleRepository(session_factory),
        reminder_repo=SQLModelReminderRepository(session_factory),
        bored_repo=SQLModelBoredRepository(session_factory, rng=rng),
        todo_repo=SQLModelTodoRepository(session_factory),
        defaults_repo=SQLModelDefaultsRepository(session_factory),
        schema_version=version,
    )


def open_store(
    config: Optional[BaseConfig] = None,
    *,
    database_path: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> HabitatStore:
    """Create the engine from configuration (or an explicit file) and initialize it."""

    if database_path is not None:
        engine = create_engine_for_path(database_path)
    else:
        engine = create_db_engine(config or BaseConfig())
    store = build_store(engine, rng=rng)
    logger.info(
        "Store opened",
        extra={"database": str(engine.url), "schema_version": store.schema_version},
    )
    return store
