import dataclasses
import logging
import uuid
from datetime import date, time

from fncli import UsageError, cli

from . import config
from .achievements import check_achievements
from .core.errors import NotFoundError, ValidationError
from .core.models import Achievement, Frequency, Habit
from .core.types import UNSET, Unset, is_set
from .engine.ledger import toggle_completion
from .engine.stats import habit_stats
from .lib import clock
from .lib.dates import parse_day, parse_month
from .lib.errors import echo
from .lib.format import format_day, format_status, format_unlock
from .lib.fuzzy import find_in_pool, find_in_pool_exact
from .store import AchievementRepository, HabitRepository

__all__ = [
    "HabitChange",
    "add_habit",
    "delete_habit",
    "find_habit",
    "find_habit_exact",
    "get_habit",
    "get_habits",
    "parse_frequency",
    "parse_time_goal",
    "toggle_check",
    "update_habit",
]

logger = logging.getLogger(__name__)


# ── domain ───────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class HabitChange:
    habit: Habit
    unlocked: tuple[Achievement, ...] = ()


def parse_frequency(value: str) -> Frequency:
    try:
        return Frequency(value.strip().lower())
    except ValueError:
        allowed = ", ".join(f.value for f in Frequency)
        raise ValidationError(f"unknown frequency '{value}' (expected one of: {allowed})") from None


def parse_time_goal(value: str) -> time | None:
    """Parse 'HH:MM'. An empty string clears the goal."""
    if not value.strip():
        return None
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"invalid time '{value}' (use HH:MM)") from None


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("habit name cannot be empty")
    return cleaned


def _save_and_check(
    habits: list[Habit],
    habit: Habit,
    repo: HabitRepository,
    catalog_repo: AchievementRepository | None,
) -> HabitChange:
    repo.save(habits)
    unlocked = check_achievements(habits, repo=catalog_repo)
    return HabitChange(habit=habit, unlocked=unlocked)


def get_habits(repo: HabitRepository | None = None) -> list[Habit]:
    return (repo or HabitRepository()).load()


def get_habit(habit_id: str, repo: HabitRepository | None = None) -> Habit | None:
    return next((h for h in get_habits(repo) if h.id == habit_id), None)


def find_habit(ref: str, repo: HabitRepository | None = None) -> Habit | None:
    return find_in_pool(ref, get_habits(repo))


def find_habit_exact(ref: str, repo: HabitRepository | None = None) -> Habit | None:
    return find_in_pool_exact(ref, get_habits(repo))


def add_habit(
    name: str,
    frequency: Frequency = Frequency.DAILY,
    icon: str = "star",
    time_goal: time | None = None,
    cue: str = "",
    motivation: str = "",
    steps: str = "",
    reward: str = "",
    repo: HabitRepository | None = None,
    catalog_repo: AchievementRepository | None = None,
) -> HabitChange:
    repo = repo or HabitRepository()
    habit = Habit(
        id=str(uuid.uuid4()),
        name=_clean_name(name),
        created_at=clock.now(),
        icon=icon or "star",
        frequency=frequency,
        time_goal=time_goal,
        cue=cue,
        motivation=motivation,
        steps=steps,
        reward=reward,
    )
    habits = [*repo.load(), habit]
    logger.debug("added habit %s (%s)", habit.id, habit.name)
    return _save_and_check(habits, habit, repo, catalog_repo)


def update_habit(
    habit_id: str,
    *,
    name: str | Unset = UNSET,
    frequency: Frequency | Unset = UNSET,
    icon: str | Unset = UNSET,
    time_goal: time | None | Unset = UNSET,
    cue: str | Unset = UNSET,
    motivation: str | Unset = UNSET,
    steps: str | Unset = UNSET,
    reward: str | Unset = UNSET,
    repo: HabitRepository | None = None,
    catalog_repo: AchievementRepository | None = None,
) -> HabitChange:
    repo = repo or HabitRepository()
    habits = repo.load()
    index = next((i for i, h in enumerate(habits) if h.id == habit_id), None)
    if index is None:
        raise NotFoundError(f"no habit with id '{habit_id}'")

    changes: dict[str, object] = {
        field: value
        for field, value in (
            ("frequency", frequency),
            ("icon", icon),
            ("time_goal", time_goal),
            ("cue", cue),
            ("motivation", motivation),
            ("steps", steps),
            ("reward", reward),
        )
        if is_set(value)
    }
    if is_set(name):
        changes["name"] = _clean_name(name)

    habit = dataclasses.replace(habits[index], **changes)
    habits[index] = habit
    return _save_and_check(habits, habit, repo, catalog_repo)


def delete_habit(habit_id: str, repo: HabitRepository | None = None) -> Habit:
    repo = repo or HabitRepository()
    habits = repo.load()
    habit = next((h for h in habits if h.id == habit_id), None)
    if habit is None:
        raise NotFoundError(f"no habit with id '{habit_id}'")
    repo.save([h for h in habits if h.id != habit_id])
    logger.debug("deleted habit %s", habit_id)
    return habit


def toggle_check(
    habit_id: str,
    on: date | None = None,
    repo: HabitRepository | None = None,
    catalog_repo: AchievementRepository | None = None,
) -> HabitChange:
    """Flip completion for `on` (today by default)."""
    today = clock.today()
    day = on or today
    if day > today:
        raise ValidationError(f"cannot check a future day ({day.isoformat()})")

    repo = repo or HabitRepository()
    habits = repo.load()
    index = next((i for i, h in enumerate(habits) if h.id == habit_id), None)
    if index is None:
        raise NotFoundError(f"no habit with id '{habit_id}'")

    habit = toggle_completion(habits[index], day)
    habits[index] = habit
    return _save_and_check(habits, habit, repo, catalog_repo)


# ── cli ──────────────────────────────────────────────────────────────────────


def announce(unlocked: tuple[Achievement, ...]) -> None:
    if not unlocked or not config.notifications_enabled():
        return
    for achievement in unlocked:
        echo(format_unlock(achievement))


def _frequency_arg(value: str | None) -> Frequency | Unset:
    return parse_frequency(value) if value is not None else UNSET


def _text_arg(value: str | None) -> str | Unset:
    return value if value is not None else UNSET


_DETAIL_FLAGS = {
    "frequency": ["-f", "--frequency"],
    "icon": ["-i", "--icon"],
    "time_goal": ["-t", "--time"],
}


@cli("habitual", flags={"name": [], **_DETAIL_FLAGS})
def add(
    name: list[str],
    frequency: str | None = None,
    icon: str | None = None,
    time_goal: str | None = None,
    cue: str | None = None,
    motivation: str | None = None,
    steps: str | None = None,
    reward: str | None = None,
) -> None:
    """Add a habit"""
    name_str = " ".join(name) if name else ""
    if not name_str.strip():
        raise UsageError("Usage: habitual add <name> [-f daily|weekly|weekdays|weekends|custom]")
    change = add_habit(
        name_str,
        frequency=parse_frequency(frequency) if frequency else Frequency.DAILY,
        icon=icon or "star",
        time_goal=parse_time_goal(time_goal) if time_goal else None,
        cue=cue or "",
        motivation=motivation or "",
        steps=steps or "",
        reward=reward or "",
    )
    echo(format_status("□", change.habit.name, change.habit.id))
    announce(change.unlocked)


@cli("habitual", flags={"ref": [], "on": ["-o", "--on"]})
def check(ref: list[str], on: str | None = None) -> None:
    """Toggle a habit done/undone (today unless --on)"""
    from .lib.resolve import resolve_habit

    item_ref = " ".join(ref) if ref else ""
    if not item_ref:
        raise UsageError("Usage: habitual check <habit> [--on DAY]")
    habit = resolve_habit(item_ref)
    today = clock.today()
    day = parse_day(on, today) if on else today
    change = toggle_check(habit.id, on=day)
    stats = habit_stats(change.habit, today, config.get_window_days())
    when = "" if day == today else f" {format_day(day)}"
    if day in change.habit.completions:
        echo(format_status("✓", f"{change.habit.name.lower()}{when}", change.habit.id))
    else:
        echo(format_status("□", f"{change.habit.name.lower()}{when}", change.habit.id))
    if stats.current_streak:
        echo(f"  streak {stats.current_streak}")
    announce(change.unlocked)


@cli("habitual", flags={"ref": [], "name": ["-n", "--name"], **_DETAIL_FLAGS})
def edit(
    ref: list[str],
    name: str | None = None,
    frequency: str | None = None,
    icon: str | None = None,
    time_goal: str | None = None,
    cue: str | None = None,
    motivation: str | None = None,
    steps: str | None = None,
    reward: str | None = None,
) -> None:
    """Edit a habit's name, frequency, icon, time or notes"""
    from .lib.resolve import resolve_habit

    habit = resolve_habit(" ".join(ref))
    fields = (name, frequency, icon, time_goal, cue, motivation, steps, reward)
    if all(f is None for f in fields):
        raise UsageError("nothing to update: use -n, -f, -i, -t, --cue, --motivation, --steps or --reward")
    change = update_habit(
        habit.id,
        name=_text_arg(name),
        frequency=_frequency_arg(frequency),
        icon=_text_arg(icon),
        time_goal=parse_time_goal(time_goal) if time_goal is not None else UNSET,
        cue=_text_arg(cue),
        motivation=_text_arg(motivation),
        steps=_text_arg(steps),
        reward=_text_arg(reward),
    )
    echo(format_status("✓", change.habit.name, change.habit.id))
    announce(change.unlocked)


@cli("habitual", flags={"ref": []})
def rm(ref: list[str]) -> None:
    """Delete a habit and its history"""
    from .lib.resolve import resolve_habit_exact

    habit = resolve_habit_exact(" ".join(ref))
    delete_habit(habit.id)
    echo(format_status("✗", habit.name, habit.id))


@cli("habitual")
def habits() -> None:
    """Show the last 7 days for every habit"""
    from .lib.render import render_habit_matrix

    echo(render_habit_matrix(get_habits(), clock.today()))


@cli("habitual", flags={"ref": [], "month": ["-m", "--month"]})
def show(ref: list[str], month: str | None = None) -> None:
    """Show habit detail with a month calendar"""
    from .lib.render import render_habit_detail
    from .lib.resolve import resolve_habit

    habit = resolve_habit(" ".join(ref))
    today = clock.today()
    year, month_num = parse_month(month) if month else (today.year, today.month)
    stats = habit_stats(habit, today, config.get_window_days())
    echo(render_habit_detail(habit, stats, year, month_num, today))
