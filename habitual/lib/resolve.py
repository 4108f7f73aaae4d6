from habitual.core.models import Habit
from habitual.habits import find_habit, find_habit_exact

from .errors import exit_error

__all__ = ["resolve_habit", "resolve_habit_exact"]


def resolve_habit(ref: str) -> Habit:
    habit = find_habit(ref)
    if not habit:
        exit_error(f"No habit found: '{ref}'")
    return habit


def resolve_habit_exact(ref: str) -> Habit:
    """Like resolve_habit but no fuzzy matching: id prefix, exact or substring name only."""
    habit = find_habit_exact(ref)
    if not habit:
        exit_error(f"No habit found: '{ref}' (rm needs an exact name or id)")
    return habit
