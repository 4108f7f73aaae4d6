import logging
from collections.abc import Sequence
from datetime import date, datetime

from fncli import cli

from .core.errors import StateError
from .core.models import Achievement, AchievementType, Habit
from .engine.achievements import default_catalog, evaluate, merge_catalog, trigger
from .lib import clock
from .lib.errors import echo
from .store import AchievementRepository

__all__ = [
    "check_achievements",
    "get_achievements",
    "load_catalog",
    "trigger_achievement",
]

logger = logging.getLogger(__name__)


def load_catalog(repo: AchievementRepository | None = None) -> tuple[Achievement, ...]:
    """Load the catalog, materialising the defaults on first run."""
    repo = repo or AchievementRepository()
    stored = repo.load()
    if not stored:
        catalog = default_catalog()
        repo.save(catalog)
        logger.info("initialised achievement catalog (%d entries)", len(catalog))
        return catalog
    catalog = merge_catalog(stored)
    if len(catalog) != len(stored):
        repo.save(catalog)
        logger.info("added %d new achievements to catalog", len(catalog) - len(stored))
    return catalog


def get_achievements(repo: AchievementRepository | None = None) -> list[Achievement]:
    return list(load_catalog(repo))


def check_achievements(
    habits: Sequence[Habit],
    repo: AchievementRepository | None = None,
    today: date | None = None,
    now: datetime | None = None,
) -> tuple[Achievement, ...]:
    """Evaluate the catalog against `habits`, persist any unlocks and return them."""
    repo = repo or AchievementRepository()
    result = evaluate(habits, load_catalog(repo), today or clock.today(), now or clock.now())
    if result.unlocked:
        repo.save(result.catalog)
        for achievement in result.unlocked:
            logger.debug("unlocked %s", achievement.title)
    return result.unlocked


def trigger_achievement(
    type_: AchievementType,
    repo: AchievementRepository | None = None,
    now: datetime | None = None,
) -> Achievement | None:
    repo = repo or AchievementRepository()
    result = trigger(load_catalog(repo), type_, now or clock.now())
    if not result.unlocked:
        return None
    repo.save(result.catalog)
    return result.unlocked[0]


@cli("habitual")
def achieve() -> None:
    """List achievements"""
    from .lib.render import render_achievements

    echo(render_achievements(get_achievements()))


@cli("habitual achieve")
def restart() -> None:
    """Record picking a dropped habit back up"""
    from .lib.format import format_unlock

    unlocked = trigger_achievement(AchievementType.RESTART)
    if unlocked is None:
        raise StateError("restart achievement already unlocked")
    echo(format_unlock(unlocked))
