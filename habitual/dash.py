from fncli import cli

from . import config
from .engine.stats import due_today, habit_stats
from .habits import get_habits
from .lib import clock
from .lib.errors import echo
from .lib.render import render_today


@cli("habitual", name="today")
def dashboard() -> None:
    """Habits due today"""
    today_date = clock.today()
    window = config.get_window_days()
    due = due_today(get_habits(), today_date)
    stats = {h.id: habit_stats(h, today_date, window) for h in due}
    echo(render_today(due, stats, today_date))
