from datetime import date

from habitual.core.models import Achievement, Frequency, Habit, HabitStats

from . import ansi

__all__ = [
    "format_bar",
    "format_day",
    "format_frequency",
    "format_habit",
    "format_rate",
    "format_status",
    "format_streak",
    "format_unlock",
]

_FREQUENCY_LABELS = {
    Frequency.DAILY: "every day",
    Frequency.WEEKLY: "mondays",
    Frequency.WEEKDAYS: "mon-fri",
    Frequency.WEEKENDS: "sat-sun",
    Frequency.CUSTOM: "custom",
}


def format_frequency(frequency: Frequency) -> str:
    return _FREQUENCY_LABELS[frequency]


def format_rate(rate: float) -> str:
    return f"{rate:.0%}"


def format_streak(days: int) -> str:
    if days <= 0:
        return ansi.muted("no streak")
    unit = "day" if days == 1 else "days"
    return ansi.orange(f"🔥 {days} {unit}")


def format_bar(rate: float, width: int = 10) -> str:
    """Fixed-width progress bar for a rate in [0, 1]."""
    filled = round(max(0.0, min(rate, 1.0)) * width)
    return ansi.green("█" * filled) + ansi.muted("░" * (width - filled))


def format_habit(habit: Habit, stats: HabitStats | None = None, show_id: bool = False) -> str:
    """Format a habit for display. Returns: [✓|□] name [time] [streak] [id]"""
    parts = []

    checked = stats.completed_today if stats else False
    parts.append(ansi.muted("✓") if checked else "□")
    parts.append(ansi.gray(habit.name.lower()) if checked else habit.name.lower())

    if habit.time_goal:
        parts.append(ansi.muted(habit.time_goal.strftime("%H:%M")))

    if stats and stats.current_streak:
        parts.append(format_streak(stats.current_streak))

    if show_id:
        parts.append(ansi.muted(f"[{habit.id[:8]}]"))

    return " ".join(parts)


def format_unlock(achievement: Achievement) -> str:
    return f"{ansi.gold('★')} {ansi.bold(achievement.title)} {ansi.muted(achievement.description)}"


def format_status(symbol: str, content: str, item_id: str | None = None) -> str:
    """Format status message for action confirmations."""
    if item_id:
        return f"{symbol} {content} {ansi.muted(f'[{item_id[:8]}]')}"
    return f"{symbol} {content}"


def format_day(day: date) -> str:
    return day.strftime("%a %-d %b").lower()
