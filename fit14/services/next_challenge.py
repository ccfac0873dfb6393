"""Suggestions for the user's next challenge, derived from their archive."""

from __future__ import annotations

from typing import Optional, Sequence

from fit14.services.archive import CompletedChallenge
from fit14.services.goal_catalog import FITNESS_LEVEL_ORDER, GoalDimension

HIGH_SUCCESS_RATE = 80.0
LOW_SUCCESS_RATE = 50.0
MAX_SUGGESTIONS = 3


def _most_recent(challenges: Sequence[CompletedChallenge]) -> Optional[CompletedChallenge]:
    return max(challenges, key=lambda c: (c.completion_date, c.created_at), default=None)


def _harder_level(level: Optional[str]) -> Optional[str]:
    if level not in FITNESS_LEVEL_ORDER:
        return None
    index = FITNESS_LEVEL_ORDER.index(level)
    if index + 1 >= len(FITNESS_LEVEL_ORDER):
        return None
    return FITNESS_LEVEL_ORDER[index + 1]


def next_challenge_suggestions(challenges: Sequence[CompletedChallenge]) -> list[str]:
    """Suggestions ordered most relevant first, at most ``MAX_SUGGESTIONS``."""
    latest = _most_recent(challenges)
    if latest is None:
        return [
            "Start your first 14-day challenge with a goal you can see yourself enjoying",
            "Pick a time per workout you can keep up for two weeks",
        ]

    profile = latest.goal_profile
    rate = latest.success_rate
    suggestions: list[str] = []

    if rate >= HIGH_SUCCESS_RATE:
        harder = _harder_level(profile.get(GoalDimension.FITNESS_LEVEL.value))
        if harder:
            suggestions.append(f"Level up: try an {harder} challenge next")
        suggestions.append("Add another session per week to build on your consistency")
    elif rate < LOW_SUCCESS_RATE:
        suggestions.append("Repeat a similar challenge to lock in the habit before stepping up")
        if profile.get(GoalDimension.TIME_AVAILABLE.value) not in (None, "15-30 minutes"):
            suggestions.append("Try shorter 15-30 minute sessions to make every day doable")
    else:
        suggestions.append("Keep the same level and aim to finish every day this time")

    location = profile.get(GoalDimension.WORKOUT_LOCATION.value)
    if location == "at home":
        suggestions.append("Mix in an outdoor or gym session for variety")
    elif location in ("at the gym", "outdoors"):
        suggestions.append("Try a home-friendly challenge for busy weeks")

    count = len(challenges)
    suggestions.append(f"Challenge #{count + 1}: set a new goal that builds on \"{latest.challenge_title}\"")
    return suggestions[:MAX_SUGGESTIONS]
