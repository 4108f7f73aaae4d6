from datetime import date, datetime, time

import pytest

from habitual.core.errors import ValidationError
from habitual.core.models import Achievement, AchievementType, Frequency, Habit
from habitual.lib.converters import (
    _parse_date,
    _parse_datetime,
    _parse_datetime_optional,
    achievement_to_record,
    habit_to_record,
    record_to_achievement,
    record_to_habit,
)


def habit_record(**overrides) -> dict:
    record = {
        "id": "h-1",
        "name": "Meditate",
        "icon": "leaf",
        "frequency": "weekdays",
        "timeGoal": "07:30",
        "cue": "after coffee",
        "motivation": "",
        "steps": "",
        "reward": "",
        "createdAt": "2024-01-01T08:00:00",
        "completions": ["2024-01-03T21:00:00", "2024-01-02", "2024-01-03"],
    }
    record.update(overrides)
    return record


def test_parse_date_from_iso_string():
    assert _parse_date("2024-01-03") == date(2024, 1, 3)
    assert _parse_date("2024-01-03T21:00:00") == date(2024, 1, 3)


def test_parse_date_from_timestamp():
    assert _parse_date(datetime(2024, 1, 3).timestamp()) == date(2024, 1, 3)


def test_parse_date_empty():
    assert _parse_date("") is None
    assert _parse_date(None) is None


def test_parse_datetime_from_date_string():
    assert _parse_datetime("2024-01-03") == datetime(2024, 1, 3)


def test_parse_datetime_rejects_empty():
    with pytest.raises(ValidationError):
        _parse_datetime("")


def test_parse_datetime_optional():
    assert _parse_datetime_optional(None) is None
    assert _parse_datetime_optional("") is None
    assert _parse_datetime_optional("2024-01-03T10:00:00") == datetime(2024, 1, 3, 10, 0)


def test_record_to_habit():
    habit = record_to_habit(habit_record())
    assert habit.name == "Meditate"
    assert habit.frequency is Frequency.WEEKDAYS
    assert habit.time_goal == time(7, 30)
    assert habit.created_at == datetime(2024, 1, 1, 8, 0)
    assert habit.completions == (date(2024, 1, 2), date(2024, 1, 3))


def test_record_to_habit_defaults_optional_fields():
    habit = record_to_habit(
        {"id": "h-2", "name": "Run", "frequency": "daily", "createdAt": "2024-01-01T08:00:00"}
    )
    assert habit.icon == "star"
    assert habit.time_goal is None
    assert habit.cue == ""
    assert habit.completions == ()


def test_unknown_frequency_rejected():
    with pytest.raises(ValidationError, match="unknown frequency 'fortnightly'"):
        record_to_habit(habit_record(frequency="fortnightly"))


@pytest.mark.parametrize("key", ["id", "name", "frequency", "createdAt"])
def test_missing_required_key_rejected(key):
    record = habit_record()
    del record[key]
    with pytest.raises(ValidationError):
        record_to_habit(record)


def test_bad_completion_rejected():
    with pytest.raises(ValidationError):
        record_to_habit(habit_record(completions=["yesterday-ish"]))


def test_habit_to_record_uses_storage_keys():
    habit = Habit(
        id="h-3",
        name="Stretch",
        created_at=datetime(2024, 1, 1, 8, 0),
        time_goal=time(6, 5),
        completions=(date(2024, 1, 2),),
    )
    record = habit_to_record(habit)
    assert record["timeGoal"] == "06:05"
    assert record["createdAt"] == "2024-01-01T08:00:00"
    assert record["completions"] == ["2024-01-02"]
    assert record["frequency"] == "daily"
    assert record_to_habit(record) == habit


def test_habit_to_record_empty_time_goal():
    habit = Habit(id="h-4", name="Walk", created_at=datetime(2024, 1, 1))
    assert habit_to_record(habit)["timeGoal"] == ""


def test_record_to_achievement():
    achievement = record_to_achievement(
        {
            "id": "a-1",
            "title": "Consistent",
            "description": "Keep one habit going for 7 days",
            "type": "streak",
            "requirement": 7,
            "icon": "flame",
            "unlocked": True,
            "unlockedDate": "2024-01-05T10:00:00",
        }
    )
    assert achievement.type is AchievementType.STREAK
    assert achievement.requirement == 7
    assert achievement.unlocked
    assert achievement.unlocked_date == datetime(2024, 1, 5, 10, 0)


def test_unknown_achievement_type_rejected():
    with pytest.raises(ValidationError, match="unknown achievementtype"):
        record_to_achievement({"id": "a-2", "title": "x", "type": "speed", "requirement": 1})


def test_achievement_to_record_locked():
    achievement = Achievement(
        id="a-3",
        title="First try",
        description="Create your first habit",
        type=AchievementType.HABITS,
        requirement=1,
    )
    record = achievement_to_record(achievement)
    assert record["unlocked"] is False
    assert record["unlockedDate"] is None
    assert record["type"] == "habits"


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_unlocked_must_be_bool(value):
    record = {
        "id": "a-4",
        "title": "First try",
        "type": "habits",
        "requirement": 1,
        "unlocked": value,
    }
    with pytest.raises(ValidationError, match="'unlocked' must be true or false"):
        record_to_achievement(record)


def test_unlocked_defaults_to_locked():
    record = {"id": "a-5", "title": "First try", "type": "habits", "requirement": 1}
    assert record_to_achievement(record).unlocked is False


def test_out_of_range_completion_timestamp_rejected():
    with pytest.raises(ValidationError):
        record_to_habit(habit_record(completions=[1e20]))


def test_out_of_range_created_at_rejected():
    with pytest.raises(ValidationError):
        record_to_habit(habit_record(createdAt=-1e20))


def test_out_of_range_unlocked_date_rejected():
    record = {
        "id": "a-6",
        "title": "First try",
        "type": "habits",
        "requirement": 1,
        "unlocked": True,
        "unlockedDate": 1e20,
    }
    with pytest.raises(ValidationError):
        record_to_achievement(record)


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_name_rejected(name):
    with pytest.raises(ValidationError, match="blank 'name'"):
        record_to_habit(habit_record(name=name))


@pytest.mark.parametrize("value", [None, {}, [], True, False, ""])
def test_malformed_completion_rejected(value):
    with pytest.raises(ValidationError, match="invalid completion"):
        record_to_habit(habit_record(completions=["2024-01-02", value]))


def test_completions_must_be_a_list():
    with pytest.raises(ValidationError, match="'completions' must be a list"):
        record_to_habit(habit_record(completions="2024-01-02"))


def test_numeric_completion_accepted():
    stamp = datetime(2024, 1, 4, 12, 0).timestamp()
    assert record_to_habit(habit_record(completions=[stamp])).completions == (date(2024, 1, 4),)
