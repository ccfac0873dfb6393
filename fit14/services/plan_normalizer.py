"""Post-parse normalization of a plan's day list.

Runs after strict validation and is the only place generated data gets
repaired: the day count is forced to the plan length and no day is left
without exercises. Every repair is logged.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Sequence, TypeVar

from fit14.services.workout_plan import Day, Exercise, ExerciseUnit

logger = logging.getLogger(__name__)

PLAN_LENGTH_DAYS = 14
REST_DAY_NAME = "Rest Day"
REST_DAY_FOCUS = "Rest and Recovery"
REST_DAY_MINUTES = 30

T = TypeVar("T")


def rest_day_exercise() -> Exercise:
    return Exercise(name=REST_DAY_NAME, sets=1, quantity=REST_DAY_MINUTES, unit=ExerciseUnit.MINUTES)


def truncate_days(days: Sequence[T], length: int = PLAN_LENGTH_DAYS) -> list[T]:
    if len(days) <= length:
        return list(days)
    logger.warning(
        "Truncating plan from %d to %d days", len(days), length,
        extra={"ctx_received_days": len(days), "ctx_plan_length": length},
    )
    return list(days[:length])


def pad_days(days: Sequence[Day], start_date: date, length: int = PLAN_LENGTH_DAYS) -> list[Day]:
    """Extend to ``length`` days by cloning the last day's exercises.

    Clones get fresh ids and start uncompleted. With no days at all the padded
    days are empty and left for ``fill_empty_days``.
    """
    result = list(days)
    if len(result) >= length:
        return result

    template = result[-1] if result else None
    logger.warning(
        "Padding plan from %d to %d days", len(result), length,
        extra={"ctx_received_days": len(result), "ctx_plan_length": length},
    )
    for day_number in range(len(result) + 1, length + 1):
        exercises: tuple[Exercise, ...] = ()
        focus = None
        if template is not None:
            exercises = tuple(
                Exercise(name=e.name, sets=e.sets, quantity=e.quantity, unit=e.unit)
                for e in template.exercises
            )
            focus = template.focus
        result.append(
            Day(
                day_number=day_number,
                date=start_date + timedelta(days=day_number - 1),
                exercises=exercises,
                focus=focus,
            )
        )
    return result


def fill_empty_days(days: Sequence[Day]) -> list[Day]:
    result = []
    for day in days:
        if day.exercises:
            result.append(day)
            continue
        logger.info(
            "Day %d has no exercises, adding rest day activity", day.day_number,
            extra={"ctx_day_number": day.day_number},
        )
        result.append(replace(day, exercises=(rest_day_exercise(),), focus=day.focus or REST_DAY_FOCUS))
    return result


def normalize_days(days: Sequence[Day], start_date: date, length: int = PLAN_LENGTH_DAYS) -> list[Day]:
    """Force exactly ``length`` non-empty days."""
    trimmed = truncate_days(days, length)
    padded = pad_days(trimmed, start_date, length)
    return fill_empty_days(padded)
