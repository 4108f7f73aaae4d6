"""Persisted record <-> model conversion.

Records are plain dicts using the storage key names (camelCase, ISO-8601 strings).
Unknown enum tags and missing required keys are rejected with ValidationError
rather than defaulted.
"""

from datetime import date, datetime, time
from enum import StrEnum
from typing import Any, TypeVar

from habitual.core.errors import ValidationError
from habitual.core.models import Achievement, AchievementType, Frequency, Habit
from habitual.engine.ledger import normalize

E = TypeVar("E", bound=StrEnum)

Record = dict[str, Any]


def _require(record: Record, key: str) -> Any:
    if key not in record or record[key] is None:
        raise ValidationError(f"record missing '{key}': {record.get('id', '?')}")
    return record[key]


def _parse_enum(enum_cls: type[E], value: object) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"unknown {enum_cls.__name__.lower()} '{value}' (expected one of: {allowed})"
        ) from None


def _parse_date(val) -> date | None:
    """Parse a date value that may be str or numeric timestamp."""
    if isinstance(val, str) and val:
        return date.fromisoformat(val.split("T")[0])
    if isinstance(val, (int, float)):
        return datetime.fromtimestamp(val).date()
    return None


def _parse_datetime(val) -> datetime:
    """Parse a datetime value that may be str or numeric timestamp."""
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return datetime.fromtimestamp(val)
    if isinstance(val, str) and val:
        try:
            return datetime.fromisoformat(val)
        except ValueError:
            return datetime.combine(date.fromisoformat(val), datetime.min.time())
    raise ValidationError(f"invalid timestamp: {val!r}")


def _parse_completion(val) -> date:
    if isinstance(val, bool) or not isinstance(val, (str, int, float)) or val == "":
        raise ValidationError(f"invalid completion: {val!r}")
    return _parse_date(val)


def _parse_bool(record: Record, key: str) -> bool:
    value = record.get(key, False)
    if not isinstance(value, bool):
        raise ValidationError(f"'{key}' must be true or false, got {value!r}")
    return value


def _parse_name(record: Record, key: str) -> str:
    name = str(_require(record, key)).strip()
    if not name:
        raise ValidationError(f"record has a blank '{key}': {record.get('id', '?')}")
    return name


def _parse_datetime_optional(val) -> datetime | None:
    if val in (None, ""):
        return None
    return _parse_datetime(val)


def _parse_time(val) -> time | None:
    if not val:
        return None
    try:
        return time.fromisoformat(val)
    except (TypeError, ValueError):
        raise ValidationError(f"invalid timeGoal: {val!r}") from None


def record_to_habit(record: Record) -> Habit:
    try:
        raw_completions = record.get("completions") or []
        if not isinstance(raw_completions, list):
            raise ValidationError(f"'completions' must be a list: {record.get('id', '?')}")
        completions = normalize(_parse_completion(v) for v in raw_completions)
        return Habit(
            id=str(_require(record, "id")),
            name=_parse_name(record, "name"),
            icon=str(record.get("icon") or "star"),
            frequency=_parse_enum(Frequency, _require(record, "frequency")),
            time_goal=_parse_time(record.get("timeGoal")),
            cue=str(record.get("cue") or ""),
            motivation=str(record.get("motivation") or ""),
            steps=str(record.get("steps") or ""),
            reward=str(record.get("reward") or ""),
            created_at=_parse_datetime(_require(record, "createdAt")),
            completions=completions,
        )
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise ValidationError(f"invalid habit record {record.get('id', '?')}: {e}") from e


def habit_to_record(habit: Habit) -> Record:
    return {
        "id": habit.id,
        "name": habit.name,
        "icon": habit.icon,
        "frequency": habit.frequency.value,
        "timeGoal": habit.time_goal.strftime("%H:%M") if habit.time_goal else "",
        "cue": habit.cue,
        "motivation": habit.motivation,
        "steps": habit.steps,
        "reward": habit.reward,
        "createdAt": habit.created_at.isoformat(),
        "completions": [d.isoformat() for d in habit.completions],
    }


def record_to_achievement(record: Record) -> Achievement:
    try:
        return Achievement(
            id=str(_require(record, "id")),
            title=str(_require(record, "title")),
            description=str(record.get("description") or ""),
            type=_parse_enum(AchievementType, _require(record, "type")),
            requirement=int(_require(record, "requirement")),
            icon=str(record.get("icon") or "star"),
            unlocked=_parse_bool(record, "unlocked"),
            unlocked_date=_parse_datetime_optional(record.get("unlockedDate")),
        )
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise ValidationError(f"invalid achievement record {record.get('id', '?')}: {e}") from e


def achievement_to_record(achievement: Achievement) -> Record:
    return {
        "id": achievement.id,
        "title": achievement.title,
        "description": achievement.description,
        "type": achievement.type.value,
        "requirement": achievement.requirement,
        "icon": achievement.icon,
        "unlocked": achievement.unlocked,
        "unlockedDate": achievement.unlocked_date.isoformat() if achievement.unlocked_date else None,
    }
