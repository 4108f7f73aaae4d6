from datetime import date, datetime, timezone

from habitual.engine.ledger import is_completed, normalize, toggle, toggle_completion


def test_normalize_collapses_same_day_and_sorts():
    values = [datetime(2024, 1, 3, 22, 0), date(2024, 1, 1), datetime(2024, 1, 3, 7, 15)]
    assert normalize(values) == (date(2024, 1, 1), date(2024, 1, 3))


def test_normalize_converts_aware_timestamps_to_local_day():
    stamp = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)
    assert normalize([stamp]) == (stamp.astimezone().date(),)


def test_toggle_adds_missing_day():
    assert toggle((date(2024, 1, 1),), date(2024, 1, 2)) == (date(2024, 1, 1), date(2024, 1, 2))


def test_toggle_removes_present_day():
    assert toggle((date(2024, 1, 1), date(2024, 1, 2)), date(2024, 1, 1)) == (date(2024, 1, 2),)


def test_toggle_accepts_timestamp():
    assert toggle((), datetime(2024, 1, 5, 23, 59)) == (date(2024, 1, 5),)


def test_toggle_twice_is_identity(make_habit, today):
    habit = make_habit(completions=[date(2024, 1, 2), date(2024, 1, 7)])
    again = toggle_completion(toggle_completion(habit, today), today)
    assert again == habit
    assert again.completions == habit.completions


def test_toggle_completion_returns_new_habit(make_habit, today):
    habit = make_habit()
    toggled = toggle_completion(habit, today)
    assert habit.completions == ()
    assert toggled.completions == (today,)
    assert toggled.id == habit.id


def test_is_completed():
    ledger = (date(2024, 1, 2),)
    assert is_completed(ledger, datetime(2024, 1, 2, 18, 0))
    assert not is_completed(ledger, date(2024, 1, 3))
