"""Progress, streak and challenge-health statistics.

Everything here is a pure function of plan state and ``today``. Functions
that only need day-level completion accept either a ``WorkoutPlan`` (its
``days``) or a ``CompletedChallenge`` (its ``daily_completion_record``); both
expose ``day_number`` and ``is_completed`` per day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Optional, Sequence

from fit14.services.workout_plan import Day, WorkoutPlan

MAX_CATCH_UP_PER_DAY = 2
RESTART_MISSED_LIMIT = 7
WEEK_LENGTH = 7


def _days_of(source: Any) -> Sequence[Any]:
    if isinstance(source, (list, tuple)):
        return source
    days = getattr(source, "days", None)
    if days is None:
        days = getattr(source, "daily_completion_record", ())
    return days


def percentage(part: float, whole: float) -> float:
    """``part / whole * 100`` clamped to [0, 100]; 0.0 for an empty or non-finite input."""
    if whole <= 0:
        return 0.0
    value = part / whole * 100.0
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 100.0)


# -- Day counts --

def total_days(source: Any) -> int:
    return len(_days_of(source))


def completed_days(source: Any) -> int:
    return sum(1 for d in _days_of(source) if d.is_completed)


def remaining_days(source: Any) -> int:
    return max(0, total_days(source) - completed_days(source))


def progress_percentage(source: Any) -> float:
    return percentage(completed_days(source), total_days(source))


def is_finished(plan: WorkoutPlan, today: Optional[date] = None) -> bool:
    """True once the calendar day after the last day has begun, completed or not."""
    if not plan.days:
        return False
    last = max(d.date for d in plan.days)
    return (today or date.today()) >= last + timedelta(days=1)


def is_completed(source: Any) -> bool:
    total = total_days(source)
    return total > 0 and completed_days(source) >= total


# -- Streaks and weeks --

def longest_streak(source: Any) -> int:
    best = run = 0
    for day in sorted(_days_of(source), key=lambda d: d.day_number):
        if day.is_completed:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


def current_streak(plan: WorkoutPlan, today: Optional[date] = None) -> int:
    """Consecutive completed days ending at today, or yesterday while today is still open."""
    today = today or date.today()
    elapsed = sorted((d for d in plan.days if d.date <= today), key=lambda d: d.day_number, reverse=True)
    if elapsed and elapsed[0].date == today and not elapsed[0].is_completed:
        elapsed = elapsed[1:]
    streak = 0
    for day in elapsed:
        if not day.is_completed:
            break
        streak += 1
    return streak


def most_consistent_week(source: Any) -> int:
    """1 or 2, whichever week has the higher completion rate. Ties go to week 1."""
    days = _days_of(source)
    week1 = [d for d in days if d.day_number <= WEEK_LENGTH]
    week2 = [d for d in days if d.day_number > WEEK_LENGTH]

    def rate(group: list) -> float:
        return sum(1 for d in group if d.is_completed) / len(group) if group else 0.0

    return 1 if rate(week1) >= rate(week2) else 2


# -- Exercise counts --

def total_exercises(source: Any) -> int:
    if isinstance(source, WorkoutPlan):
        return sum(len(d.exercises) for d in source.days)
    return int(getattr(source, "total_exercises", 0))


def completed_exercises(source: Any) -> int:
    if isinstance(source, WorkoutPlan):
        return sum(d.completed_exercise_count for d in source.days)
    return int(getattr(source, "completed_exercises", 0))


def exercise_completion_percentage(source: Any) -> float:
    return percentage(completed_exercises(source), total_exercises(source))


# -- Schedule --

def next_incomplete_day(plan: WorkoutPlan) -> Optional[Day]:
    return next((d for d in sorted(plan.days, key=lambda d: d.day_number) if not d.is_completed), None)


def current_day(plan: WorkoutPlan, today: Optional[date] = None) -> Optional[Day]:
    return next((d for d in plan.days if d.is_today(today)), None)


def days_left(plan: WorkoutPlan, today: Optional[date] = None) -> int:
    """Calendar days of the plan that have not yet passed, today included."""
    return sum(1 for d in plan.days if not d.is_past_due(today))


def missed_days(plan: WorkoutPlan, today: Optional[date] = None) -> list[Day]:
    return [d for d in plan.days if d.is_missed(today)]


def past_day_success_rate(plan: WorkoutPlan, today: Optional[date] = None) -> float:
    past = [d for d in plan.days if d.is_past_due(today)]
    return percentage(sum(1 for d in past if d.is_completed), len(past))


def catch_up_available_days(plan: WorkoutPlan, today: Optional[date] = None) -> list[Day]:
    if is_finished(plan, today):
        return []
    window = len(plan.days)
    return [d for d in plan.days if d.is_available_for_catch_up(today, window)]


def suggested_catch_up_days(
    plan: WorkoutPlan, today: Optional[date] = None, max_per_day: int = MAX_CATCH_UP_PER_DAY
) -> int:
    return min(len(catch_up_available_days(plan, today)), max_per_day)


def should_offer_restart(plan: WorkoutPlan, today: Optional[date] = None) -> bool:
    missed = len(missed_days(plan, today))
    return missed > total_days(plan) // 2 or missed > RESTART_MISSED_LIMIT


# -- Health --

class ChallengeHealthStatus(str, Enum):
    EXCELLENT = "excellent"
    ON_TRACK = "on_track"
    SLIGHTLY_BEHIND = "slightly_behind"
    BEHIND_BUT_RECOVERABLE = "behind_but_recoverable"
    STRUGGLING = "struggling"
    NEEDS_SUPPORT = "needs_support"

    @property
    def description(self) -> str:
        return _HEALTH_DESCRIPTIONS[self]

    @property
    def emoji(self) -> str:
        return _HEALTH_EMOJI[self]


_HEALTH_DESCRIPTIONS = {
    ChallengeHealthStatus.EXCELLENT: "Crushing it!",
    ChallengeHealthStatus.ON_TRACK: "On track",
    ChallengeHealthStatus.SLIGHTLY_BEHIND: "Slightly behind",
    ChallengeHealthStatus.BEHIND_BUT_RECOVERABLE: "Behind but recoverable",
    ChallengeHealthStatus.STRUGGLING: "Struggling but not out",
    ChallengeHealthStatus.NEEDS_SUPPORT: "Needs support",
}

_HEALTH_EMOJI = {
    ChallengeHealthStatus.EXCELLENT: "🔥",
    ChallengeHealthStatus.ON_TRACK: "💪",
    ChallengeHealthStatus.SLIGHTLY_BEHIND: "⚡",
    ChallengeHealthStatus.BEHIND_BUT_RECOVERABLE: "🎯",
    ChallengeHealthStatus.STRUGGLING: "💙",
    ChallengeHealthStatus.NEEDS_SUPPORT: "🤝",
}


def health_status(
    plan: WorkoutPlan, today: Optional[date] = None, max_per_day: int = MAX_CATCH_UP_PER_DAY
) -> ChallengeHealthStatus:
    total = total_days(plan)
    missed = len(missed_days(plan, today))

    if missed > total // 2:
        return ChallengeHealthStatus.NEEDS_SUPPORT
    if missed > max_per_day * days_left(plan, today):
        return ChallengeHealthStatus.STRUGGLING
    if missed >= 3:
        return ChallengeHealthStatus.BEHIND_BUT_RECOVERABLE
    if missed > 0:
        return ChallengeHealthStatus.SLIGHTLY_BEHIND
    if completed_days(plan) > total // 2:
        return ChallengeHealthStatus.EXCELLENT
    return ChallengeHealthStatus.ON_TRACK


def motivational_message(plan: WorkoutPlan, today: Optional[date] = None) -> str:
    if is_finished(plan, today):
        return f"You completed {int(progress_percentage(plan))}% of your challenge!"
    missed = len(missed_days(plan, today))
    if missed == 0:
        if past_day_success_rate(plan, today) >= 90:
            return "Amazing consistency! Keep it up!"
        return "You're doing great! Stay on track!"
    if missed == 1:
        return "Life happens! One makeup day and you're back on track!"
    if missed <= 3:
        return "You've got this! A few catch-up sessions and you'll be done!"
    if missed <= 6:
        return "Don't stop now! You've come too far to quit!"
    return "Every step counts! Ready to finish strong?"


@dataclass(frozen=True)
class HealthSummary:
    status: ChallengeHealthStatus
    missed_count: int
    days_remaining: int
    message: str


def health_summary(plan: WorkoutPlan, today: Optional[date] = None) -> HealthSummary:
    return HealthSummary(
        status=health_status(plan, today),
        missed_count=len(missed_days(plan, today)),
        days_remaining=days_left(plan, today),
        message=motivational_message(plan, today),
    )
