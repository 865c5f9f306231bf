"""Habitat: embedded single-writer SQLite storage for habits, check-ins and notes."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestingConfig
from .store import HabitatStore, build_store, open_store

__version__ = "0.1.0"

__all__ = [
    "BaseConfig",
    "DevConfig",
    "HabitatStore",
    "TestingConfig",
    "build_store",
    "open_store",
]
