from fncli import cli

from . import config
from .engine.rates import week_to_date_rate
from .engine.stats import aggregate, insights, top_habits
from .habits import get_habits
from .lib import clock
from .lib.errors import echo
from .lib.render import render_stats


@cli("habitual")
def stats() -> None:
    """Overall completion statistics"""
    habits = get_habits()
    today_date = clock.today()
    window = config.get_window_days()
    echo(
        render_stats(
            aggregate(habits, today_date, window),
            top_habits(habits),
            insights(habits, today_date, window),
            week_to_date_rate(habits, today_date),
        )
    )
