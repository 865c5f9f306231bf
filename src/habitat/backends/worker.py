"""Gated backend: one writer thread fed from an asyncio queue.

Before touching the database the worker must win the :class:`ConcurrencyGate`
for the data directory. A second process (or a second worker in this one)
gets ``LOCK_UNAVAILABLE`` and then answers every request with an error.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..dispatch import Dispatcher, RequestType
from ..errors import HabitatError, StorageUnavailableError
from ..infra.database import serialize_database
from ..infra.lock import ConcurrencyGate
from ..logging_config import get_logger
from ..store import HabitatStore, open_store
from .base import INIT_ERROR, LOCK_UNAVAILABLE, READY, Backend

logger = get_logger("backend.worker")

_STOP = object()


class WorkerBackend(Backend):
    """Single-writer backend guarded by an exclusive cross-process lock."""

    name = "worker"

    def __init__(self, *args: Any, sleep: Optional[Callable[[float], None]] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        gate_kwargs: dict[str, Any] = {
            "attempts": self.config.LOCK_ATTEMPTS,
            "retry_delay": self.config.LOCK_RETRY_DELAY,
        }
        if sleep is not None:
            gate_kwargs["sleep"] = sleep
        lock_path = (
            Path(self.database_path).with_suffix(".lock")
            if self.database_path is not None
            else self.config.LOCK_PATH
        )
        self.gate = ConcurrencyGate(lock_path, **gate_kwargs)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="habitat-writer")
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._pump_task: Optional[asyncio.Task[None]] = None
        self._wiped = False
        self._stopped = False

    def _startup(self) -> None:
        """Runs on the writer thread: gate first, then schema, migrations and seeds."""
        self.gate.acquire()
        try:
            self.store = open_store(self.config, database_path=self.database_path, rng=self.rng)
        except BaseException:
            self.gate.release()
            raise
        self.dispatcher = Dispatcher(
            self.store,
            overrides={
                RequestType.EXPORT_DB: self._export_db,
                RequestType.WIPE_STORAGE: self._wipe_storage,
            },
        )

    async def start(self) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(self._executor, self._startup)
        except StorageUnavailableError as exc:
            self.failure = str(exc)
            return self._publish(LOCK_UNAVAILABLE, str(exc))
        except (HabitatError, SQLAlchemyError, OSError) as exc:
            self.failure = str(exc)
            return self._publish(INIT_ERROR, str(exc))
        self.ready = True
        self._pump_task = asyncio.create_task(self._pump())
        return self._publish(READY)

    async def _pump(self) -> None:
        """Feed queued requests to the writer thread strictly one at a time."""
        loop = asyncio.get_running_loop()
        while True:
            item = await self._queue.get()
            if item is _STOP:
                break
            message, future = item
            try:
                response = await loop.run_in_executor(self._executor, self._run, message)
            except Exception as exc:  # pragma: no cover - dispatch already envelopes errors
                logger.exception("Writer thread failed")
                response = {"ok": False, "error": str(exc)}
            if not future.done():
                future.set_result(response)

    def _run(self, message: Mapping[str, Any]) -> dict[str, Any]:
        if self._wiped or self.dispatcher is None:
            return {"ok": False, "error": "Storage unavailable: storage was wiped"}
        return self.dispatcher.dispatch(message)

    async def request(self, message: Mapping[str, Any]) -> dict[str, Any]:
        request_id = message.get("id")
        if not self.ready:
            return self._unavailable(request_id)
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        await self._queue.put((message, future))
        return self._envelope(request_id, await future)

    # Driver-specific operations, called on the writer thread.

    def _require_store(self) -> HabitatStore:
        if self.store is None or self._wiped:
            raise StorageUnavailableError("Storage unavailable: storage is not open")
        return self.store

    def _export_db(self, _payload: Any) -> bytes:
        return serialize_database(self._require_store().engine)

    def _wipe_storage(self, _payload: Any) -> None:
        """Close the engine and delete the database with its WAL and shared-memory files."""
        store = self._require_store()
        database = store.engine.url.database
        store.close()
        self._wiped = True
        if database and database != ":memory:":
            for suffix in ("", "-wal", "-shm"):
                Path(f"{database}{suffix}").unlink(missing_ok=True)
        logger.warning("Storage wiped", extra={"database": database})
        return None

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._pump_task is not None:
            await self._queue.put(_STOP)
            await self._pump_task
            self._pump_task = None
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self._shutdown)
        self._executor.shutdown(wait=True)
        self.ready = False

    def _shutdown(self) -> None:
        if self.store is not None and not self._wiped:
            self.store.close()
        self.gate.release()
