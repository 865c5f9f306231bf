"""Backend implementations behind one request/response contract."""

from __future__ import annotations

from typing import Optional

from ..config import BaseConfig
from .base import INIT_ERROR, LOCK_UNAVAILABLE, READY, Backend
from .native import NativeBackend
from .worker import WorkerBackend

BACKEND_CLASSES: dict[str, type[Backend]] = {
    WorkerBackend.name: WorkerBackend,
    NativeBackend.name: NativeBackend,
}


def create_backend(config: Optional[BaseConfig] = None, **kwargs) -> Backend:
    """Instantiate the backend named by ``config.BACKEND``."""

    config = config or BaseConfig()
    return BACKEND_CLASSES[config.BACKEND](config, **kwargs)


__all__ = [
    "BACKEND_CLASSES",
    "INIT_ERROR",
    "LOCK_UNAVAILABLE",
    "READY",
    "Backend",
    "NativeBackend",
    "WorkerBackend",
    "create_backend",
]
