from datetime import date, timedelta

import pytest

from fit14.services import progress
from fit14.services.progress import ChallengeHealthStatus
from fit14.services.workout_plan import Day, Exercise, PlanStatus, WorkoutPlan

START = date(2026, 4, 6)


def _plan(completed=(), days=14, exercises_per_day=2):
    """Plan starting at START; ``completed`` lists the day numbers fully done."""
    built = []
    for n in range(1, days + 1):
        done = n in completed
        built.append(
            Day(
                day_number=n,
                date=START + timedelta(days=n - 1),
                exercises=tuple(Exercise(f"Ex {i}", 3, 10, is_completed=done) for i in range(exercises_per_day)),
            )
        )
    return WorkoutPlan(user_goals_text="Goals", days=tuple(built), status=PlanStatus.ACTIVE)


def _on_day(n):
    return START + timedelta(days=n - 1)


# --- Counts and percentages ---

def test_counts():
    plan = _plan(completed={1, 2, 3})
    assert progress.total_days(plan) == 14
    assert progress.completed_days(plan) == 3
    assert progress.remaining_days(plan) == 11
    assert progress.progress_percentage(plan) == pytest.approx(300 / 14)


def test_zero_day_plan_is_zero_percent():
    plan = WorkoutPlan(user_goals_text="Goals")
    assert progress.progress_percentage(plan) == 0.0
    assert not progress.is_completed(plan)
    assert not progress.is_finished(plan, START)


def test_percentage_clamps_over_count():
    assert progress.percentage(15, 14) == 100.0
    assert progress.percentage(-1, 14) == 0.0
    assert progress.percentage(3, 0) == 0.0


def test_finished_vs_completed():
    plan = _plan(completed=set(range(1, 15)))
    assert progress.is_completed(plan)
    assert not progress.is_finished(plan, _on_day(14))
    assert progress.is_finished(plan, _on_day(15))
    assert progress.is_finished(_plan(), _on_day(15))
    assert not progress.is_completed(_plan())


# --- Streaks ---

def test_longest_streak_by_day_number():
    assert progress.longest_streak(_plan(completed={1, 2, 4, 5, 6, 9})) == 3
    assert progress.longest_streak(_plan()) == 0


def test_current_streak_ignores_open_today():
    plan = _plan(completed={2, 3, 4})
    assert progress.current_streak(plan, _on_day(5)) == 3
    assert progress.current_streak(plan, _on_day(6)) == 0


def test_most_consistent_week():
    assert progress.most_consistent_week(_plan(completed={8, 9, 10})) == 2
    assert progress.most_consistent_week(_plan(completed={1, 8})) == 1
    assert progress.most_consistent_week(_plan()) == 1


# --- Exercises ---

def test_exercise_counts():
    plan = _plan(completed={1}, exercises_per_day=3)
    assert progress.total_exercises(plan) == 42
    assert progress.completed_exercises(plan) == 3
    assert progress.exercise_completion_percentage(plan) == pytest.approx(3 / 42 * 100)


# --- Schedule ---

def test_next_incomplete_and_current_day():
    plan = _plan(completed={1, 2})
    assert progress.next_incomplete_day(plan).day_number == 3
    assert progress.current_day(plan, _on_day(5)).day_number == 5
    assert progress.current_day(plan, START - timedelta(days=1)) is None


def test_missed_and_catch_up_days():
    plan = _plan(completed={1, 3})
    today = _on_day(6)
    assert [d.day_number for d in progress.missed_days(plan, today)] == [2, 4, 5]
    assert [d.day_number for d in progress.catch_up_available_days(plan, today)] == [2, 4, 5]
    assert progress.suggested_catch_up_days(plan, today) == 2
    assert progress.catch_up_available_days(plan, _on_day(15)) == []


def test_should_offer_restart():
    assert not progress.should_offer_restart(_plan(), _on_day(8))
    assert progress.should_offer_restart(_plan(), _on_day(9))


# --- Health ---

@pytest.mark.parametrize(
    "completed, today_day, expected",
    [
        ({1, 2, 3}, 4, ChallengeHealthStatus.ON_TRACK),
        (set(range(1, 9)), 9, ChallengeHealthStatus.EXCELLENT),
        ({1, 2}, 4, ChallengeHealthStatus.SLIGHTLY_BEHIND),
        ({1}, 5, ChallengeHealthStatus.BEHIND_BUT_RECOVERABLE),
        (set(), 9, ChallengeHealthStatus.NEEDS_SUPPORT),
        (set(range(1, 14)) - {3, 4, 5}, 14, ChallengeHealthStatus.STRUGGLING),
    ],
)
def test_health_status(completed, today_day, expected):
    assert progress.health_status(_plan(completed=completed), _on_day(today_day)) is expected


def test_health_summary():
    summary = progress.health_summary(_plan(completed={1, 3}), _on_day(4))
    assert summary.status is ChallengeHealthStatus.SLIGHTLY_BEHIND
    assert summary.missed_count == 1
    assert summary.days_remaining == 11
    assert summary.message == "Life happens! One makeup day and you're back on track!"


def test_motivational_message_after_finish():
    plan = _plan(completed=set(range(1, 8)))
    assert progress.motivational_message(plan, _on_day(20)) == "You completed 50% of your challenge!"


def test_health_status_has_description():
    assert ChallengeHealthStatus.STRUGGLING.description == "Struggling but not out"
