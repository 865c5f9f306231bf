"""Due-date arithmetic for recurring todos."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from ..infra.clock import parse_day


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the last day of a shorter month."""

    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


def next_due(from_date: str, rule: Optional[str]) -> str:
    """Next occurrence after ``from_date``: +1 day, +7 days or +1 month.

    A missing rule counts as daily. An unrecognised rule leaves the date as is.
    """

    day = parse_day(from_date)
    rule = rule or "daily"
    if rule == "daily":
        day += timedelta(days=1)
    elif rule == "weekly":
        day += timedelta(days=7)
    elif rule == "monthly":
        day = add_months(day, 1)
    return day.isoformat()
