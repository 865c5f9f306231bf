"""Contract shared by the two backends: start once, then answer enveloped requests."""

from __future__ import annotations

import asyncio
import random
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ..config import BaseConfig
from ..dispatch import Dispatcher
from ..logging_config import get_logger
from ..store import HabitatStore

logger = get_logger("backend")

READY = "READY"
LOCK_UNAVAILABLE = "LOCK_UNAVAILABLE"
INIT_ERROR = "INIT_ERROR"


class Backend(ABC):
    """One data-layer instance per process.

    Lifecycle signals (``READY``, ``LOCK_UNAVAILABLE``, ``INIT_ERROR``) are
    published on :attr:`signals` outside the request/response flow. Until
    ``READY`` every request is answered with a storage-unavailable error.
    """

    name = "base"

    def __init__(
        self,
        config: Optional[BaseConfig] = None,
        *,
        database_path: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or BaseConfig()
        self.database_path = database_path
        self.rng = rng
        self.signals: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.store: Optional[HabitatStore] = None
        self.dispatcher: Optional[Dispatcher] = None
        self.ready = False
        self.failure: Optional[str] = None

    def _publish(self, signal_type: str, message: Optional[str] = None) -> dict[str, Any]:
        signal: dict[str, Any] = {"type": signal_type}
        if message is not None:
            signal["message"] = message
        self.signals.put_nowait(signal)
        log = logger.info if signal_type == READY else logger.error
        log("Backend %s signalled %s", self.name, signal_type, extra={"backend": self.name})
        return signal

    def _unavailable(self, request_id: Any) -> dict[str, Any]:
        reason = self.failure or "not ready"
        return {"id": request_id, "ok": False, "error": f"Storage unavailable: {reason}"}

    @staticmethod
    def _envelope(request_id: Any, response: Mapping[str, Any]) -> dict[str, Any]:
        return {"id": request_id, **response}

    @abstractmethod
    async def start(self) -> dict[str, Any]:
        """Initialise storage and return the lifecycle signal that was published."""

    @abstractmethod
    async def request(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """Answer ``{id, type, payload?}`` with ``{id, ok, data|error}``."""

    @abstractmethod
    async def stop(self) -> None:
        """Release storage and any exclusive lock."""

    async def __aenter__(self) -> "Backend":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
