"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

BACKENDS = ("worker", "native")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Habitat"
    DB_FILENAME = "habitat.db"
    LOCK_FILENAME = "habitat.lock"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITAT_DEV_MODE", default=True)
        self.DATABASE_PATH = self.DATA_DIR / self.DB_FILENAME
        self.DATABASE_URL = os.getenv("HABITAT_DATABASE_URL", f"sqlite:///{self.DATABASE_PATH}")
        self.LOCK_PATH = self.DATA_DIR / self.LOCK_FILENAME
        self.BACKEND = os.getenv("HABITAT_BACKEND", "worker").strip().lower()
        self.LOCK_ATTEMPTS = _env_int("HABITAT_LOCK_ATTEMPTS", 3)
        self.LOCK_RETRY_DELAY = _env_float("HABITAT_LOCK_RETRY_DELAY", 1.0)
        if self.BACKEND not in BACKENDS:
            raise ValueError(f"HABITAT_BACKEND must be one of {', '.join(BACKENDS)}.")
        if self.LOCK_ATTEMPTS < 1:
            raise ValueError("HABITAT_LOCK_ATTEMPTS must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file, lock file and logs live."""

        data_root = os.getenv("HABITAT_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / ".local" / "share" / self.APP_NAME.lower()
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        # One writer thread owns the engine, but sessions may be opened from
        # the backend's executor rather than the thread that created it.
        connect_args: dict[str, Any] = {"check_same_thread": False}
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite; keeps lock retries fast."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.LOCK_RETRY_DELAY = 0.0
