from collections.abc import Sequence
from datetime import date

from habitual.core.models import (
    Achievement,
    Habit,
    HabitStats,
    Insights,
    Statistics,
)
from habitual.engine.recurrence import should_complete

from . import ansi
from .ansi import bold, dim, white
from .dates import days_back, month_days
from .format import (
    format_bar,
    format_frequency,
    format_habit,
    format_rate,
    format_streak,
)

__all__ = [
    "render_achievements",
    "render_habit_detail",
    "render_habit_matrix",
    "render_stats",
    "render_today",
]

_NAME_WIDTH = 15

_TIPS = [
    "habits take time: get a little better every day",
    "tie a new habit to something you already do",
    "a fixed time and place makes a habit easier to start",
    "make it obvious, attractive, easy and satisfying",
    "reward yourself each time you follow through",
]


def _header(text: str) -> str:
    return f"\n{bold(white(text))}"


def tip_for(today: date) -> str:
    return _TIPS[today.toordinal() % len(_TIPS)]


def render_today(habits: Sequence[Habit], stats: dict[str, HabitStats], today: date) -> str:
    """Habits due today, open ones first."""
    lines = [bold(white(today.strftime("%a") + " · " + today.strftime("%-d %b %Y")))]
    if not habits:
        lines.append(ansi.gray("  nothing due today. add one with `habitual add <name>`"))
        return "\n".join(lines)

    done = [h for h in habits if stats[h.id].completed_today]
    lines.append(_header(f"TODAY ({len(done)}/{len(habits)})"))

    def _sort_key(h: Habit):
        return (stats[h.id].completed_today, h.time_goal is None, h.time_goal, h.name.lower())

    ordered = sorted(habits, key=_sort_key)
    lines.extend(f"  {format_habit(h, stats[h.id], show_id=True)}" for h in ordered)
    lines.append(f"\n{dim('tip: ' + tip_for(today))}")
    return "\n".join(lines)


def render_habit_matrix(habits: Sequence[Habit], today: date) -> str:
    if not habits:
        return "No habits found."

    lines = ["HABIT TRACKER (last 7 days)\n"]
    dates = list(days_back(today, 7))
    day_names = [d.strftime("%a").lower() for d in dates]

    header = f"{'habit':<{_NAME_WIDTH}} " + " ".join(day_names) + "   key"
    lines.append(header)
    lines.append("-" * len(header))

    for habit in sorted(habits, key=lambda x: x.name.lower()):
        name = habit.name.lower()[:_NAME_WIDTH]
        done = set(habit.completions)
        indicators = []
        for day in dates:
            if day in done:
                indicators.append("✓")
            elif should_complete(habit.frequency, day):
                indicators.append("□")
            else:
                indicators.append("·")
        lines.append(
            f"{name:<{_NAME_WIDTH}} {'   '.join(indicators)}   {ansi.muted(f'[{habit.id[:8]}]')}"
        )

    return "\n".join(lines)


def _render_month(habit: Habit, year: int, month: int, today: date) -> list[str]:
    title = date(year, month, 1).strftime("%B %Y")
    weekdays = " ".join(f"{d:>3}" for d in ("mo", "tu", "we", "th", "fr", "sa", "su"))
    lines = [f"  {bold(title)}", f"  {weekdays}"]
    done = set(habit.completions)
    for week in month_days(year, month):
        cells = []
        for day in week:
            if day is None:
                cells.append("   ")
                continue
            label = f"{day.day:>3}"
            if day in done:
                label = ansi.green(label)
            elif day > today:
                label = ansi.muted(label)
            elif not should_complete(habit.frequency, day):
                label = ansi.muted(label)
            elif day >= habit.created_at.date():
                label = ansi.red(label)
            if day == today:
                label = bold(label)
            cells.append(label)
        lines.append("  " + " ".join(cells))
    return lines


def render_habit_detail(
    habit: Habit, stats: HabitStats, year: int, month: int, today: date
) -> str:
    lines = [bold(white(habit.name)) + f"  {ansi.muted(f'[{habit.id[:8]}]')}"]
    meta = [format_frequency(habit.frequency), f"icon {habit.icon}"]
    if habit.time_goal:
        meta.append(f"at {habit.time_goal.strftime('%H:%M')}")
    meta.append(f"since {habit.created_at.strftime('%-d %b %Y').lower()}")
    lines.append(ansi.gray(" · ".join(meta)))

    lines.append(_header("PROGRESS"))
    lines.append(f"  current  {format_streak(stats.current_streak)}")
    lines.append(f"  best     {stats.best_streak} {'day' if stats.best_streak == 1 else 'days'}")
    lines.append(f"  rate     {format_bar(stats.completion_rate)} {format_rate(stats.completion_rate)}")
    lines.append(f"  total    {len(habit.completions)}")

    lines.append(_header("CALENDAR"))
    lines.extend(_render_month(habit, year, month, today))

    notes = [
        ("cue", habit.cue),
        ("motivation", habit.motivation),
        ("steps", habit.steps),
        ("reward", habit.reward),
    ]
    present = [(label, text) for label, text in notes if text]
    if present:
        lines.append(_header("NOTES"))
        lines.extend(f"  {ansi.muted(f'{label}:'):<12} {text}" for label, text in present)

    return "\n".join(lines)


def render_stats(
    statistics: Statistics,
    top: Sequence[Habit],
    insights: Insights | None,
    week_rate: float,
) -> str:
    if not statistics.total_habits:
        return "No data yet. Stats appear once you start tracking habits."

    lines = [bold(white("OVERVIEW"))]
    lines.append(f"  habits        {statistics.total_habits}")
    lines.append(f"  completions   {statistics.total_completions}")
    lines.append(
        f"  rate          {format_bar(statistics.completion_rate)} {format_rate(statistics.completion_rate)}"
    )
    lines.append(f"  this week     {format_bar(week_rate)} {format_rate(week_rate)}")

    lines.append(_header("STREAKS"))
    if statistics.best_streak > 0:
        lines.append(f"  best          {statistics.best_streak} days")
        lines.append(f"  habit         {statistics.best_streak_habit}")
    else:
        lines.append(ansi.gray("  no streaks yet"))

    lines.append(_header("TOP HABITS"))
    for rank, habit in enumerate(top, start=1):
        lines.append(f"  {rank}. {habit.name.lower():<{_NAME_WIDTH}} {len(habit.completions)}×")

    if insights:
        lines.append(_header("INSIGHTS"))
        lines.append(
            f"  easiest       {insights.strongest.name} ({format_rate(insights.strongest_rate)})"
        )
        lines.append(
            f"  needs work    {insights.weakest.name} ({format_rate(insights.weakest_rate)})"
        )

    return "\n".join(lines)


def render_achievements(catalog: Sequence[Achievement]) -> str:
    if not catalog:
        return "no achievements yet"
    unlocked = sum(1 for a in catalog if a.unlocked)
    lines = [bold(white(f"ACHIEVEMENTS ({unlocked}/{len(catalog)})"))]
    for a in catalog:
        if a.unlocked:
            when = a.unlocked_date.strftime("%d/%m/%y") if a.unlocked_date else ""
            lines.append(f"  {ansi.gold('★')} {a.title}  {ansi.muted(a.description)}  {dim(when)}")
        else:
            lines.append(f"  {ansi.muted('☆ ' + a.title)}  {ansi.muted(a.description)}")
    return "\n".join(lines)
