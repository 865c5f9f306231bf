"""Streak calculation over qualifying calendar days."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ..infra.clock import parse_day, today as utc_today


def compute_streaks(days: Iterable[str], *, today: date | str | None = None) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from qualifying ``YYYY-MM-DD`` days.

    The current streak walks backward from ``today``; days after ``today`` are
    ignored and the first missing day ends it. The longest streak is the longest
    run of consecutive days anywhere in the history.
    """

    if today is None:
        today = utc_today()
    anchor = today if isinstance(today, date) else parse_day(today)
    dates_desc = sorted({parse_day(d) for d in days}, reverse=True)
    if not dates_desc:
        return 0, 0

    # Current streak: consecutive days ending today.
    current = 0
    expected = anchor
    for day in dates_desc:
        if day == expected:
            current += 1
            expected -= timedelta(days=1)
        elif day < expected:
            break

    # Longest streak: sweep ascending, counting consecutive runs.
    longest = 0
    run = 0
    previous: date | None = None
    for day in reversed(dates_desc):
        run = run + 1 if previous is not None and day == previous + timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    return current, longest


__all__ = ["compute_streaks"]
