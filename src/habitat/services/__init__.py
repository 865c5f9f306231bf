"""Pure domain services layered above the repositories."""

from .oracle import build_pool, pick
from .recurrence import next_due
from .streaks import compute_streaks

__all__ = ["build_pool", "compute_streaks", "next_due", "pick"]
