import uuid
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

import fncli
import pytest

import habitual
from habitual import config, db
from habitual.core.models import Frequency, Habit
from habitual.lib import ansi, clock

FIXED_NOW = datetime(2024, 1, 10, 9, 30)  # a wednesday

fncli.autodiscover(Path(habitual.__file__).parent, "habitual")


class FnCLIRunner:
    def invoke(self, args: list[str]):
        return fncli.invoke(["habitual", *args])


@pytest.fixture
def runner() -> FnCLIRunner:
    return FnCLIRunner()


@pytest.fixture
def fixed_now(monkeypatch) -> datetime:
    monkeypatch.setattr(clock, "now", lambda: FIXED_NOW)
    return FIXED_NOW


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def make_habit():
    def _make(
        name: str = "stretch",
        frequency: Frequency = Frequency.DAILY,
        completions: Iterable[date] = (),
        **fields,
    ) -> Habit:
        return Habit(
            id=fields.pop("id", str(uuid.uuid4())),
            name=name,
            created_at=fields.pop("created_at", datetime(2023, 12, 1, 8, 0)),
            frequency=frequency,
            completions=tuple(sorted(set(completions))),
            **fields,
        )

    return _make


@pytest.fixture
def tmp_habitual_dir(tmp_path, monkeypatch, fixed_now) -> Path:
    home = tmp_path / ".habitual"
    monkeypatch.setattr(config, "HABITUAL_DIR", home)
    monkeypatch.setattr(config, "DB_PATH", home / "habitual.db")
    monkeypatch.setattr(config, "CONFIG_PATH", home / "config.yaml")
    config.reload()
    db.init()
    yield home
    ansi.use(ansi.DEFAULT)
