"""Achievement catalog and unlock evaluation.

Unlocks only move forward: a locked entry may become unlocked, never the reverse,
and `unlocked_date` is stamped once at the moment of unlock. Both `evaluate` and
`trigger` return a new catalog; persisting it is the caller's job.
"""

import dataclasses
import uuid
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from habitual.core.models import Achievement, AchievementType, Evaluation, Habit

from .streaks import current_streak

__all__ = ["default_catalog", "evaluate", "merge_catalog", "trigger"]

_DEFAULTS: tuple[tuple[str, str, AchievementType, int, str], ...] = (
    ("First try", "Create your first habit", AchievementType.HABITS, 1, "star"),
    ("Habit builder", "Create 5 habits", AchievementType.HABITS, 5, "star"),
    ("Habit master", "Create 10 habits", AchievementType.HABITS, 10, "star-circle"),
    ("First step", "Complete a habit for the first time", AchievementType.COMPLETIONS, 1, "check"),
    ("Consistent", "Keep one habit going for 7 days", AchievementType.STREAK, 7, "flame"),
    ("Relentless", "Keep one habit going for 30 days", AchievementType.STREAK, 30, "flame-circle"),
    ("Fresh start", "Pick a habit back up after dropping it", AchievementType.RESTART, 1, "restart"),
)


def default_catalog() -> tuple[Achievement, ...]:
    return tuple(
        Achievement(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            type=type_,
            requirement=requirement,
            icon=icon,
        )
        for title, description, type_, requirement, icon in _DEFAULTS
    )


def merge_catalog(stored: Sequence[Achievement]) -> tuple[Achievement, ...]:
    """Append default entries missing from a stored catalog, matched by (type, requirement)."""
    known = {(a.type, a.requirement) for a in stored}
    missing = [a for a in default_catalog() if (a.type, a.requirement) not in known]
    return (*stored, *missing)


def _unlock(achievement: Achievement, now: datetime) -> Achievement:
    return dataclasses.replace(achievement, unlocked=True, unlocked_date=now)


def _is_met(
    achievement: Achievement, habits: Sequence[Habit], total_completions: int, streaks: list[int]
) -> bool:
    match achievement.type:
        case AchievementType.HABITS:
            return len(habits) >= achievement.requirement
        case AchievementType.COMPLETIONS:
            return total_completions >= achievement.requirement
        case AchievementType.STREAK:
            return any(s >= achievement.requirement for s in streaks)
        case AchievementType.RESTART:
            # only unlocked through trigger()
            return False


def evaluate(
    habits: Sequence[Habit], catalog: Iterable[Achievement], today: date, now: datetime
) -> Evaluation:
    """Unlock every locked entry whose threshold the habit collection now meets.

    Idempotent: a second call with the same inputs unlocks nothing.
    """
    total_completions = sum(len(h.completions) for h in habits)
    streaks = [current_streak(h, today) for h in habits]

    updated: list[Achievement] = []
    unlocked: list[Achievement] = []
    for achievement in catalog:
        if not achievement.unlocked and _is_met(achievement, habits, total_completions, streaks):
            achievement = _unlock(achievement, now)
            unlocked.append(achievement)
        updated.append(achievement)
    return Evaluation(catalog=tuple(updated), unlocked=tuple(unlocked))


def trigger(
    catalog: Iterable[Achievement], type_: AchievementType, now: datetime
) -> Evaluation:
    """Manually unlock the first locked entry of `type_`, if any."""
    updated: list[Achievement] = []
    unlocked: list[Achievement] = []
    for achievement in catalog:
        if not unlocked and achievement.type is type_ and not achievement.unlocked:
            achievement = _unlock(achievement, now)
            unlocked.append(achievement)
        updated.append(achievement)
    return Evaluation(catalog=tuple(updated), unlocked=tuple(unlocked))
