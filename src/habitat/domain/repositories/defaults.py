"""Seed ledger repository protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DefaultsRepository(Protocol):
    """Repository for the applied-defaults ledger."""

    def is_applied(self, key: str) -> bool:
        ...

    def mark_applied(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...

    def keys(self) -> list[str]:
        ...
