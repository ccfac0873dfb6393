import logging
from datetime import date

from fit14.services.plan_normalizer import (
    REST_DAY_FOCUS,
    fill_empty_days,
    normalize_days,
    pad_days,
    truncate_days,
)
from fit14.services.workout_plan import Day, Exercise

START = date(2026, 5, 4)


def _day(n, *names):
    return Day(n, date(2026, 5, 3 + n), tuple(Exercise(name, 3, 10) for name in names), focus=f"F{n}")


def test_truncate_keeps_first_entries():
    assert truncate_days(list(range(20)), 14) == list(range(14))
    assert truncate_days([1, 2], 14) == [1, 2]


def test_pad_clones_last_day_with_fresh_uncompleted_exercises():
    source = [_day(1, "Push-ups"), _day(2, "Squats")]
    source[1] = source[1].toggling_exercise(source[1].exercises[0].id)
    padded = pad_days(source, START, 4)
    assert [d.day_number for d in padded] == [1, 2, 3, 4]
    assert padded[3].date == date(2026, 5, 7)
    clone = padded[2].exercises[0]
    assert clone.name == "Squats"
    assert clone.id != source[1].exercises[0].id
    assert not clone.is_completed
    assert padded[2].focus == "F2"


def test_pad_without_days_creates_empty_days():
    padded = pad_days([], START, 3)
    assert [d.exercises for d in padded] == [(), (), ()]


def test_fill_empty_days_adds_rest_activity():
    [filled] = fill_empty_days([Day(1, START)])
    assert filled.focus == REST_DAY_FOCUS
    assert filled.exercises[0].quantity == 30


def test_normalize_logs_repairs(caplog):
    with caplog.at_level(logging.INFO, logger="fit14.services.plan_normalizer"):
        days = normalize_days([_day(1, "Rows")], START, 14)
    assert len(days) == 14
    assert "Padding plan from 1 to 14 days" in caplog.text


def test_normalize_leaves_complete_plan_untouched():
    days = [_day(n, "Rows") for n in range(1, 15)]
    assert normalize_days(days, START) == days
