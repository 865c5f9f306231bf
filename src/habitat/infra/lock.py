"""Cross-process exclusive ownership of the data directory.

The gate holds an open ``BEGIN EXCLUSIVE`` transaction on a sidecar SQLite
file for as long as the owning process lives. Any other process (or another
connection in this one) gets ``database is locked`` immediately because the
connection uses a zero busy-timeout. The OS drops the lock when the holder
exits, so a crashed owner never blocks the next start for long.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool

from ..errors import StorageUnavailableError
from ..logging_config import get_logger

logger = get_logger("gate")

DEFAULT_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0


class ConcurrencyGate:
    """Fail-closed, single-holder lock acquired once at startup."""

    def __init__(
        self,
        lock_path: Path | str,
        *,
        attempts: int = DEFAULT_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.lock_path = Path(lock_path)
        self.attempts = attempts
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None

    @property
    def held(self) -> bool:
        return self._conn is not None

    def try_acquire_exclusive(self) -> bool:
        """Single non-blocking attempt; True when this gate now holds the lock."""

        if self._conn is not None:
            return True
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{self.lock_path}",
            poolclass=NullPool,
            isolation_level="AUTOCOMMIT",
            connect_args={"timeout": 0, "check_same_thread": False},
        )
        conn = engine.connect()
        try:
            conn.exec_driver_sql("PRAGMA locking_mode = EXCLUSIVE")
            conn.exec_driver_sql("BEGIN EXCLUSIVE")
        except OperationalError as exc:
            logger.debug("Lock attempt failed: %s", exc)
            conn.close()
            engine.dispose()
            return False
        self._engine, self._conn = engine, conn
        return True

    def acquire(self) -> None:
        """Try up to ``attempts`` times with a fixed delay; raise if never obtained."""

        for attempt in range(1, self.attempts + 1):
            if self.try_acquire_exclusive():
                logger.info(
                    "Acquired exclusive storage lock",
                    extra={"lock_path": str(self.lock_path), "attempt": attempt},
                )
                return
            if attempt < self.attempts:
                self._sleep(self.retry_delay)
        logger.warning(
            "Storage lock unavailable",
            extra={"lock_path": str(self.lock_path), "attempts": self.attempts},
        )
        raise StorageUnavailableError(
            f"Another process holds the storage lock at {self.lock_path}"
        )

    def release(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.exec_driver_sql("ROLLBACK")
        except OperationalError:
            pass  # already closed by the driver; closing below releases the lock
        finally:
            self._conn.close()
            if self._engine is not None:
                self._engine.dispose()
            self._conn = None
            self._engine = None
        logger.info("Released storage lock", extra={"lock_path": str(self.lock_path)})

    def __enter__(self) -> "ConcurrencyGate":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
