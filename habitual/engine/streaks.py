"""Current and best streak.

The two numbers measure different things and the difference is kept on purpose:

- `current_streak` is active adherence. It walks due days only, so a weekday
  habit is not broken by an idle weekend.
- `best_streak` is the lifetime best run of consecutive calendar days in the
  ledger, regardless of the habit's frequency.
"""

from datetime import date, timedelta

from habitual.core.models import Habit

from .recurrence import should_complete

__all__ = ["best_streak", "current_streak"]

_ONE_DAY = timedelta(days=1)


def current_streak(habit: Habit, today: date) -> int:
    """Consecutive completed due days ending today, or yesterday if today is still open.

    A streak is alive only when today or yesterday is completed. Today, when due and not
    yet done, neither counts nor breaks. The walk stops at the earliest completion: no
    earlier day can add to the count.
    """
    done = set(habit.completions)
    if not done:
        return 0
    if today not in done and today - _ONE_DAY not in done:
        return 0

    earliest = min(done)
    streak = 0
    day = today
    while day >= earliest:
        if should_complete(habit.frequency, day):
            if day in done:
                streak += 1
            elif day != today:
                break
        day -= _ONE_DAY
    return streak


def best_streak(habit: Habit) -> int:
    """Longest run of consecutive calendar days ever completed. Ignores frequency."""
    days = sorted(set(habit.completions))
    if not days:
        return 0

    best = run = 1
    for previous, current in zip(days, days[1:], strict=False):
        if (current - previous).days == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best
