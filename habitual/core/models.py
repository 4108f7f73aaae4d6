import dataclasses
from datetime import date, datetime, time
from enum import StrEnum


class Frequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    CUSTOM = "custom"


class AchievementType(StrEnum):
    HABITS = "habits"
    COMPLETIONS = "completions"
    STREAK = "streak"
    RESTART = "restart"


@dataclasses.dataclass(frozen=True)
class Habit:
    id: str
    name: str
    created_at: datetime
    icon: str = "star"
    frequency: Frequency = Frequency.DAILY
    time_goal: time | None = None
    cue: str = ""
    motivation: str = ""
    steps: str = ""
    reward: str = ""
    completions: tuple[date, ...] = dataclasses.field(default=(), hash=False)


@dataclasses.dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    type: AchievementType
    requirement: int
    icon: str = "star"
    unlocked: bool = False
    unlocked_date: datetime | None = None


@dataclasses.dataclass(frozen=True)
class HabitStats:
    current_streak: int = 0
    best_streak: int = 0
    completion_rate: float = 0.0
    completed_today: bool = False


@dataclasses.dataclass(frozen=True)
class Statistics:
    total_habits: int = 0
    total_completions: int = 0
    completion_rate: float = 0.0
    best_streak: int = 0
    best_streak_habit: str = ""


@dataclasses.dataclass(frozen=True)
class Evaluation:
    catalog: tuple[Achievement, ...]
    unlocked: tuple[Achievement, ...] = ()


@dataclasses.dataclass(frozen=True)
class Insights:
    strongest: Habit
    strongest_rate: float
    weakest: Habit
    weakest_rate: float
