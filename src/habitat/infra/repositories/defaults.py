"""Repository view over the seed ledger."""

from __future__ import annotations

from ..database import SessionFactory
from ..seeds import applied_keys, clear_applied_defaults, is_default_applied, mark_default_applied


class SQLModelDefaultsRepository:
    """Read and reset the ``applied_defaults`` ledger."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def is_applied(self, key: str) -> bool:
        return is_default_applied(self.session_factory, key)

    def mark_applied(self, key: str) -> None:
        mark_default_applied(self.session_factory, key)

    def clear(self) -> None:
        """Forget every applied seed; they all run again on the next start."""
        clear_applied_defaults(self.session_factory)

    def keys(self) -> list[str]:
        return applied_keys(self.session_factory)
