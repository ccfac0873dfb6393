"""Error taxonomy for goal input, plan generation and response parsing.

Every error carries a ``user_message`` that a client can show as-is, separate
from the technical ``str()`` used in logs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class Fit14Error(Exception):
    """Base class for all Fit14 core errors."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class InvalidInput(Fit14Error, ValueError):
    """Local data is empty or malformed. Recovered inline, never fatal."""

    user_message = "Please describe your fitness goal"


class PlanLockedError(InvalidInput):
    """An active plan only accepts completion toggles."""

    user_message = "This plan is active. Only exercise completion can change."


class ConfigurationError(Fit14Error):
    user_message = "Unable to connect to the AI service. Please try again later."


class NetworkFailure(Fit14Error):
    """The request never produced a server response. Retryable by the user."""

    user_message = "Network connection failed. Please check your internet and try again."


class RequestTimeout(NetworkFailure):
    user_message = "The request took too long. Please check your connection and try again."


class NoInternetConnection(NetworkFailure):
    user_message = "You appear to be offline. Connect to the internet and try again."


class ServiceError(Fit14Error):
    """The AI service reported a failure or returned an unusable payload."""

    user_message = "The AI service could not create your plan. Please try again in a few moments."


class InvalidResponse(ServiceError):
    user_message = "The AI service returned an unexpected response. Please try again."


class ExerciseValidationError(ServiceError):
    """A single exercise in the AI response broke the inbound contract."""

    user_message = "One exercise in the generated plan was invalid and was left out."

    def __init__(
        self,
        message: str,
        *,
        day_number: int | None = None,
        exercise_name: str = "",
        field: str = "",
        value: Any = None,
    ):
        super().__init__(message)
        self.day_number = day_number
        self.exercise_name = exercise_name
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "dayNumber": self.day_number,
            "exerciseName": self.exercise_name,
            "field": self.field,
            "value": self.value,
        }


class RateLimited(Fit14Error):
    """Generation quota exhausted. Clients show the reset time instead of retry."""

    user_message = "You've reached the limit for AI-generated workout plans."

    def __init__(self, message: str | None = None, reset_at: datetime | None = None):
        super().__init__(message)
        self.reset_at = reset_at

    @property
    def reset_message(self) -> str:
        if self.reset_at is None:
            return "Please try again later."
        return f"You can generate a new plan after {self.reset_at:%Y-%m-%d %H:%M} UTC."


class GenerationInProgress(Fit14Error):
    user_message = "A workout plan is already being generated."
