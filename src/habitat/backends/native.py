"""Direct backend: the process owns its connection, so no cross-process gate runs.

Requests are serialised by an :class:`asyncio.Lock` and executed in a worker
thread so the event loop never blocks on SQLite.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..dispatch import Dispatcher, RequestType
from ..errors import HabitatError, UnsupportedOperationError
from ..store import open_store
from .base import INIT_ERROR, READY, Backend


def _export_db_unsupported(_payload: Any) -> Any:
    raise UnsupportedOperationError("Raw DB export is not supported on the native backend")


def _wipe_noop(_payload: Any) -> None:
    return None


class NativeBackend(Backend):
    """Lock-guarded backend without the exclusivity gate."""

    name = "native"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._lock: Optional[asyncio.Lock] = None

    async def start(self) -> dict[str, Any]:
        self._lock = asyncio.Lock()
        try:
            self.store = await asyncio.to_thread(
                open_store, self.config, database_path=self.database_path, rng=self.rng
            )
        except (HabitatError, SQLAlchemyError, OSError) as exc:
            self.failure = str(exc)
            return self._publish(INIT_ERROR, str(exc))
        self.dispatcher = Dispatcher(
            self.store,
            overrides={
                RequestType.EXPORT_DB: _export_db_unsupported,
                RequestType.WIPE_STORAGE: _wipe_noop,
            },
        )
        self.ready = True
        return self._publish(READY)

    async def request(self, message: Mapping[str, Any]) -> dict[str, Any]:
        request_id = message.get("id")
        if not self.ready or self.dispatcher is None or self._lock is None:
            return self._unavailable(request_id)
        async with self._lock:
            response = await asyncio.to_thread(self.dispatcher.dispatch, message)
        return self._envelope(request_id, response)

    async def stop(self) -> None:
        if self.store is not None:
            async with self._lock or asyncio.Lock():
                await asyncio.to_thread(self.store.close)
            self.store = None
        self.ready = False
