from collections.abc import Iterable, Iterator
from datetime import date

from habitual.core.models import Frequency
from habitual.lib.dates import Weekday, weekday_of

__all__ = ["ANCHOR_WEEKDAY", "due_days", "should_complete"]

ANCHOR_WEEKDAY = Weekday.MONDAY

_WEEKEND = {Weekday.SATURDAY, Weekday.SUNDAY}


def should_complete(frequency: Frequency, day: date) -> bool:
    """Whether `day` is a due day under `frequency`."""
    if frequency is Frequency.WEEKLY:
        return weekday_of(day) == ANCHOR_WEEKDAY
    if frequency is Frequency.WEEKDAYS:
        return weekday_of(day) not in _WEEKEND
    if frequency is Frequency.WEEKENDS:
        return weekday_of(day) in _WEEKEND
    # daily, and custom until per-habit schedules exist
    return True


def due_days(frequency: Frequency, days: Iterable[date]) -> Iterator[date]:
    return (d for d in days if should_complete(frequency, d))
