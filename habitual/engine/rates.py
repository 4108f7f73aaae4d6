from collections.abc import Sequence
from datetime import date, timedelta

from habitual.core.models import Habit
from habitual.lib.dates import days_back, week_start

from .recurrence import due_days

__all__ = ["DEFAULT_WINDOW", "completion_rate", "week_to_date_rate"]

DEFAULT_WINDOW = 30


def completion_rate(habit: Habit, today: date, window: int = DEFAULT_WINDOW) -> float:
    """Share of due days completed in the `window` days ending today (inclusive)."""
    done = set(habit.completions)
    due = list(due_days(habit.frequency, days_back(today, window)))
    if not due:
        return 0.0
    return sum(1 for d in due if d in done) / len(due)


def week_to_date_rate(habits: Sequence[Habit], today: date) -> float:
    """Share of all habits' due days completed from Monday through today."""
    start = week_start(today)
    span = [start + timedelta(days=i) for i in range((today - start).days + 1)]
    due = done = 0
    for habit in habits:
        completed = set(habit.completions)
        for day in due_days(habit.frequency, span):
            due += 1
            done += day in completed
    return done / due if due else 0.0
