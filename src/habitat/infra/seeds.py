"""Default content, applied once per key and recorded in ``applied_defaults``.

The ledger, not the seeded rows, decides whether a seed runs: deleting the
Morning Check-in template does not bring it back on the next start, while
clearing the ledger re-arms every seed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from sqlalchemy import delete
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models import AppliedDefault, BoredActivity, BoredCategory, CheckinQuestion, CheckinTemplate
from .clock import new_id, utc_now
from .codec import dump_optional_json
from .database import SessionFactory

logger = get_logger("seeds")


@dataclass(frozen=True)
class Seed:
    """A named, one-shot insertion run inside the same transaction as its ledger row."""

    key: str
    apply: Callable[[Session], None]


def _template_seed(
    title: str,
    schedule_type: str,
    days_active: list[int] | None,
    questions: Sequence[tuple[str, str]],
) -> Callable[[Session], None]:
    def apply(session: Session) -> None:
        template = CheckinTemplate(
            id=new_id(),
            title=title,
            schedule_type=schedule_type,
            days_active=dump_optional_json(days_active),
        )
        session.add(template)
        session.flush()
        for order, (prompt, response_type) in enumerate(questions):
            session.add(
                CheckinQuestion(
                    id=new_id(),
                    template_id=template.id,
                    prompt=prompt,
                    response_type=response_type,
                    display_order=order,
                )
            )

    return apply


def _category_seed(
    category_id: str,
    name: str,
    icon: str,
    color: str,
    sort_order: int,
    activities: Sequence[tuple[str, str, int]],
) -> Callable[[Session], None]:
    def apply(session: Session) -> None:
        conn = session.connection()
        conn.execute(
            sqlite_insert(BoredCategory)
            .values(
                id=category_id,
                name=name,
                icon=icon,
                color=color,
                is_system=1,
                sort_order=sort_order,
                created_at=utc_now(),
            )
            .on_conflict_do_nothing()
        )
        for title, description, minutes in activities:
            conn.execute(
                sqlite_insert(BoredActivity)
                .values(
                    id=new_id(),
                    title=title,
                    description=description,
                    category_id=category_id,
                    estimated_minutes=minutes,
                    tags="[]",
                    annotations="{}",
                    is_recurring=0,
                    is_done=0,
                    done_count=0,
                    created_at=utc_now(),
                )
                .on_conflict_do_nothing()
            )

    return apply


SEEDS: tuple[Seed, ...] = (
    Seed(
        "checkin_template:morning_checkin",
        _template_seed(
            "Morning Check-in",
            "DAILY",
            None,
            [
                ("How did you sleep?", "SCALE"),
                ("How is your energy level right now?", "SCALE"),
                ("What's your main intention for today?", "TEXT"),
                ("Are you feeling anxious or stressed?", "BOOLEAN"),
            ],
        ),
    ),
    Seed(
        "checkin_template:evening_reflection",
        _template_seed(
            "Evening Reflection",
            "DAILY",
            None,
            [
                ("Overall mood today (1–10)?", "SCALE"),
                ("What went well today?", "TEXT"),
                ("What could have gone better?", "TEXT"),
                ("Did you complete your main intention?", "BOOLEAN"),
            ],
        ),
    ),
    Seed(
        "checkin_template:weekly_review",
        _template_seed(
            "Weekly Review",
            "WEEKLY",
            [0],  # Sunday
            [
                ("How would you rate this week overall (1–10)?", "SCALE"),
                ("What were your biggest wins?", "TEXT"),
                ("Which habit are you most proud of?", "TEXT"),
                ("What will you focus on next week?", "TEXT"),
            ],
        ),
    ),
    Seed(
        "bored:cat:reading",
        _category_seed(
            "bored-cat-reading", "Things to Read", "i-heroicons-book-open", "#3b82f6", 0,
            [
                ("Read 10 pages of current book", "Pick up wherever you left off.", 20),
                ("Catch up on saved articles", "Clear your reading list a bit.", 15),
                ("Wikipedia rabbit hole", "Start on any topic and follow curiosity.", 30),
            ],
        ),
    ),
    Seed(
        "bored:cat:chores",
        _category_seed(
            "bored-cat-chores", "Chores", "i-heroicons-home", "#f59e0b", 1,
            [
                ("Clean one small area", "A drawer, a shelf, a corner. Pick one.", 15),
                ("Do laundry", "Throw in a load or fold what's waiting.", 45),
                ("Organize one drawer", "Just one. It always feels satisfying.", 20),
            ],
        ),
    ),
    Seed(
        "bored:cat:contacts",
        _category_seed(
            "bored-cat-contacts", "People to Contact", "i-heroicons-chat-bubble-left", "#10b981", 2,
            [
                ("Text a friend you haven't spoken to lately", 'A simple "hey, how are you?" goes a long way.', 5),
                ("Send an appreciation message", "Tell someone you appreciate them.", 5),
                ("Catch up with family", "Call or message a family member.", 15),
            ],
        ),
    ),
    Seed(
        "bored:cat:learning",
        _category_seed(
            "bored-cat-learning", "Things to Learn", "i-heroicons-academic-cap", "#8b5cf6", 3,
            [
                ("Watch a YouTube tutorial", "Pick a skill you've been curious about.", 20),
                ("Practice a skill for 15 min", "Music, language, coding: whatever you're building.", 15),
                ("Read documentation or a how-to", "Level up something you already use.", 20),
            ],
        ),
    ),
    Seed(
        "bored:cat:idle",
        _category_seed(
            "bored-cat-idle", "Idle Quests", "i-heroicons-sparkles", "#f97316", 4,
            [
                ("Take a 10-min walk", "No destination needed. Just move.", 10),
                ("Stretch or light yoga", "Even 5 minutes resets the body.", 10),
                ("Doodle without overthinking", "Pen and paper, no expectations.", 15),
                ("Listen to a new album", "Pick something outside your usual taste.", 30),
            ],
        ),
    ),
)


def apply_default_seeds(
    session_factory: SessionFactory, seeds: Sequence[Seed] = SEEDS
) -> list[str]:
    """Run every seed whose key is not in the ledger; return the keys applied.

    A seed's inserts and its ledger row commit together, so a failing seed
    leaves neither behind and is retried on the next start.
    """

    applied: list[str] = []
    for seed in seeds:
        with session_factory() as session:
            if session.get(AppliedDefault, seed.key) is not None:
                continue
            seed.apply(session)
            session.add(AppliedDefault(key=seed.key, applied_at=utc_now()))
        applied.append(seed.key)
        logger.debug("Applied default seed %s", seed.key)
    return applied


def is_default_applied(session_factory: SessionFactory, key: str) -> bool:
    with session_factory() as session:
        return session.get(AppliedDefault, key) is not None


def mark_default_applied(session_factory: SessionFactory, key: str) -> None:
    with session_factory() as session:
        session.connection().execute(
            sqlite_insert(AppliedDefault)
            .values(key=key, applied_at=utc_now())
            .on_conflict_do_nothing()
        )


def clear_applied_defaults(session_factory: SessionFactory) -> None:
    with session_factory() as session:
        session.connection().execute(delete(AppliedDefault))


def applied_keys(session_factory: SessionFactory) -> list[str]:
    with session_factory() as session:
        return list(session.exec(select(AppliedDefault.key).order_by(AppliedDefault.key)).all())
