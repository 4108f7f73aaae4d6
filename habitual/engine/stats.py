from collections.abc import Sequence
from datetime import date

from habitual.core.models import Habit, HabitStats, Insights, Statistics

from .rates import DEFAULT_WINDOW, completion_rate
from .recurrence import should_complete
from .streaks import best_streak, current_streak

__all__ = ["aggregate", "due_today", "habit_stats", "insights", "top_habits"]


def habit_stats(habit: Habit, today: date, window: int = DEFAULT_WINDOW) -> HabitStats:
    return HabitStats(
        current_streak=current_streak(habit, today),
        best_streak=best_streak(habit),
        completion_rate=completion_rate(habit, today, window),
        completed_today=today in habit.completions,
    )


def aggregate(habits: Sequence[Habit], today: date, window: int = DEFAULT_WINDOW) -> Statistics:
    if not habits:
        return Statistics()
    rates = [completion_rate(h, today, window) for h in habits]
    bests = [best_streak(h) for h in habits]
    top = max(bests)
    return Statistics(
        total_habits=len(habits),
        total_completions=sum(len(h.completions) for h in habits),
        completion_rate=sum(rates) / len(habits),
        best_streak=top,
        best_streak_habit=habits[bests.index(top)].name,
    )


def top_habits(habits: Sequence[Habit], limit: int = 3) -> list[Habit]:
    """Habits with the most completions first; ties keep collection order."""
    return sorted(habits, key=lambda h: len(h.completions), reverse=True)[:limit]


def due_today(habits: Sequence[Habit], today: date) -> list[Habit]:
    return [h for h in habits if should_complete(h.frequency, today)]


def insights(
    habits: Sequence[Habit], today: date, window: int = DEFAULT_WINDOW
) -> Insights | None:
    if not habits:
        return None
    rated = [(completion_rate(h, today, window), h) for h in habits]
    strongest_rate, strongest = max(rated, key=lambda pair: pair[0])
    weakest_rate, weakest = min(rated, key=lambda pair: pair[0])
    return Insights(
        strongest=strongest,
        strongest_rate=strongest_rate,
        weakest=weakest,
        weakest_rate=weakest_rate,
    )
