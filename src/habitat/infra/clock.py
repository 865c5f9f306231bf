"""Identifier and timestamp helpers shared by every writer."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T07:30:00.000Z``."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today() -> str:
    """Current UTC calendar day as ``YYYY-MM-DD``."""

    return datetime.now(timezone.utc).date().isoformat()


def parse_day(value: str) -> date:
    return date.fromisoformat(value[:10])
