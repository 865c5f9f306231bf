"""Caller-side transport: correlation ids, READY handling and envelope unwrapping."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Optional

from .backends import READY, Backend
from .dispatch import Request, RequestType
from .errors import RequestFailedError, StorageUnavailableError
from .logging_config import get_logger

logger = get_logger("client")


class DataClient:
    """Talks to one backend; no request is sent before it has signalled ``READY``."""

    def __init__(self, backend: Backend, *, ready_timeout: Optional[float] = 30.0) -> None:
        self.backend = backend
        self.ready_timeout = ready_timeout
        self._ids = itertools.count(1)
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    async def connect(self) -> None:
        """Start the backend and wait for its first lifecycle signal.

        Raises :class:`StorageUnavailableError` on ``LOCK_UNAVAILABLE``,
        ``INIT_ERROR`` or when no signal arrives within ``ready_timeout``.
        """

        await self.backend.start()
        try:
            signal = await asyncio.wait_for(self.backend.signals.get(), self.ready_timeout)
        except asyncio.TimeoutError:
            raise StorageUnavailableError("Storage did not become ready in time") from None
        if signal.get("type") != READY:
            message = signal.get("message") or signal.get("type")
            raise StorageUnavailableError(f"Storage unavailable: {message}")
        self._ready = True
        logger.debug("Client connected to %s backend", self.backend.name)

    async def send(self, request_type: RequestType | str, payload: Any = None) -> dict[str, Any]:
        """Send one request and return the raw ``{id, ok, data|error}`` envelope."""

        if not self._ready:
            raise StorageUnavailableError("Storage unavailable: no READY signal received")
        tag = request_type.value if isinstance(request_type, RequestType) else str(request_type)
        request = Request(id=f"req-{next(self._ids)}", type=tag, payload=payload).model_dump()
        response = await self.backend.request(request)
        if response.get("id") != request["id"]:
            raise RuntimeError(
                f"Correlation mismatch: sent {request['id']}, received {response.get('id')}"
            )
        return response

    async def call(self, request_type: RequestType | str, payload: Any = None) -> Any:
        """Send and unwrap: return ``data`` or raise :class:`RequestFailedError`."""

        response = await self.send(request_type, payload)
        if not response.get("ok"):
            tag = request_type.value if isinstance(request_type, RequestType) else str(request_type)
            raise RequestFailedError(tag, str(response.get("error")))
        return response.get("data")

    async def close(self) -> None:
        self._ready = False
        await self.backend.stop()

    async def __aenter__(self) -> "DataClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
