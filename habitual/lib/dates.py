import calendar
import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from enum import IntEnum

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from habitual.core.errors import ValidationError

__all__ = [
    "Weekday",
    "day_difference",
    "days_back",
    "is_same_day",
    "month_days",
    "parse_day",
    "parse_month",
    "start_of_day",
    "week_start",
    "weekday_of",
]


class Weekday(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


_DAY_NAMES = {
    "mon": Weekday.MONDAY,
    "tue": Weekday.TUESDAY,
    "wed": Weekday.WEDNESDAY,
    "thu": Weekday.THURSDAY,
    "fri": Weekday.FRIDAY,
    "sat": Weekday.SATURDAY,
    "sun": Weekday.SUNDAY,
}

_FULL_NAMES = {day.name.lower(): day.name[:3].lower() for day in Weekday}

_DAYS_AGO_RE = re.compile(r"^-(\d+)$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def start_of_day(value: date | datetime) -> date:
    """Normalize a timestamp to its local calendar day.

    Aware datetimes are converted to local time first; naive ones are taken as local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return start_of_day(a) == start_of_day(b)


def day_difference(a: date | datetime, b: date | datetime) -> int:
    """Calendar days from a to b. Negative when b is earlier."""
    return (start_of_day(b) - start_of_day(a)).days


def weekday_of(value: date | datetime) -> Weekday:
    return Weekday(start_of_day(value).weekday())


def days_back(today: date, count: int) -> Iterator[date]:
    """The `count` days ending at today, oldest first."""
    for offset in range(count - 1, -1, -1):
        yield today - timedelta(days=offset)


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def month_days(year: int, month: int) -> list[list[date | None]]:
    """Monday-first weeks of a month; cells outside the month are None."""
    weeks = calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month)
    return [[d if d.month == month else None for d in week] for week in weeks]


def parse_day(text: str, today: date) -> date:
    """Parse a user-supplied day: 'today', 'yesterday', 'mon'..'sun', '-N' or a date string.

    Weekday names resolve to the most recent such day, never a future one.
    """
    value = text.strip().lower()
    if value == "today":
        return today
    if value == "yesterday":
        return today - timedelta(days=1)
    weekday = _DAY_NAMES.get(_FULL_NAMES.get(value, value))
    if weekday is not None:
        back = (today.weekday() - weekday) % 7
        return today - timedelta(days=back)
    match = _DAYS_AGO_RE.match(value)
    if match:
        return today - timedelta(days=int(match.group(1)))
    try:
        parsed = dateutil_parser.parse(text, default=datetime(today.year, today.month, today.day))
    except (ParserError, ValueError, OverflowError) as e:
        raise ValidationError(f"cannot parse day '{text}'") from e
    return start_of_day(parsed)


def parse_month(text: str) -> tuple[int, int]:
    match = _MONTH_RE.match(text.strip())
    if not match:
        raise ValidationError(f"invalid month '{text}' (use YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"invalid month '{text}' (use YYYY-MM)")
    return year, month
