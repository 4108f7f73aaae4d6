import dataclasses
from collections.abc import Iterable
from datetime import date, datetime

from habitual.core.models import Habit
from habitual.lib.dates import start_of_day

__all__ = ["is_completed", "normalize", "toggle", "toggle_completion"]


def normalize(values: Iterable[date | datetime]) -> tuple[date, ...]:
    """Collapse same-day entries and sort ascending."""
    return tuple(sorted({start_of_day(v) for v in values}))


def is_completed(completions: Iterable[date], day: date | datetime) -> bool:
    return start_of_day(day) in set(completions)


def toggle(completions: Iterable[date], day: date | datetime) -> tuple[date, ...]:
    target = start_of_day(day)
    days = set(normalize(completions))
    if target in days:
        days.remove(target)
    else:
        days.add(target)
    return tuple(sorted(days))


def toggle_completion(habit: Habit, today: date | datetime) -> Habit:
    """The only mutator of a habit's ledger. Returns a new Habit."""
    return dataclasses.replace(habit, completions=toggle(habit.completions, today))
