import dataclasses
import json

from habitual.achievements import (
    check_achievements,
    get_achievements,
    load_catalog,
    trigger_achievement,
)
from habitual.core.models import AchievementType
from habitual.store import ACHIEVEMENTS_KEY, AchievementRepository, BlobStore


def test_first_load_materialises_defaults(tmp_habitual_dir):
    catalog = load_catalog()
    assert len(catalog) == 7
    assert load_catalog() == catalog
    assert BlobStore().get(ACHIEVEMENTS_KEY) is not None


def test_load_merges_new_defaults(tmp_habitual_dir):
    repo = AchievementRepository()
    repo.save(load_catalog()[:3])
    catalog = load_catalog(repo)
    assert len(catalog) == 7
    assert len(repo.load()) == 7


def test_check_saves_only_on_unlock(tmp_habitual_dir, make_habit):
    before = BlobStore().get(ACHIEVEMENTS_KEY)
    assert check_achievements([]) == ()
    assert BlobStore().get(ACHIEVEMENTS_KEY) != before  # first run materialised the catalog

    stored = BlobStore().get(ACHIEVEMENTS_KEY)
    assert check_achievements([]) == ()
    assert BlobStore().get(ACHIEVEMENTS_KEY) == stored

    unlocked = check_achievements([make_habit()])
    assert [a.title for a in unlocked] == ["First try"]
    assert check_achievements([make_habit()]) == ()


def test_trigger_restart(tmp_habitual_dir, fixed_now):
    unlocked = trigger_achievement(AchievementType.RESTART)
    assert unlocked.title == "Fresh start"
    assert unlocked.unlocked_date == fixed_now
    assert trigger_achievement(AchievementType.RESTART) is None
    restart = next(a for a in get_achievements() if a.type is AchievementType.RESTART)
    assert restart.unlocked


def test_unlocked_state_persists_as_records(tmp_habitual_dir, make_habit):
    check_achievements([make_habit()])
    records = json.loads(BlobStore().get(ACHIEVEMENTS_KEY))
    first = next(r for r in records if r["title"] == "First try")
    assert first["unlocked"] is True
    assert first["unlockedDate"] == "2024-01-10T09:30:00"


def test_catalog_edits_survive(tmp_habitual_dir):
    repo = AchievementRepository()
    catalog = list(load_catalog(repo))
    catalog[0] = dataclasses.replace(catalog[0], title="Day one")
    repo.save(catalog)
    assert load_catalog(repo)[0].title == "Day one"
