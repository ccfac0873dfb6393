"""Pydantic validation models for the AI plan generation response."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fit14.services.workout_plan import ExerciseUnit


class ExercisePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    sets: int = Field(gt=0, strict=True)
    quantity: int = Field(gt=0, strict=True)
    unit: ExerciseUnit

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("unit", mode="before")
    @classmethod
    def known_unit(cls, v):
        if not isinstance(v, str):
            raise ValueError("unit must be a string")
        try:
            return ExerciseUnit.parse(v)
        except ValueError:
            allowed = ", ".join(u.value for u in ExerciseUnit)
            raise ValueError(f"unit {v!r} must be one of {allowed}") from None


class DayPayload(BaseModel):
    """One day of the response. Exercises stay raw so each can fail on its own."""

    model_config = ConfigDict(populate_by_name=True)

    day_number: int = Field(alias="dayNumber", strict=True)
    focus: Optional[str] = None
    exercises: list[Any] = Field(default_factory=list)


class PlanPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_title: Optional[str] = Field(default=None, alias="planTitle")
    summary: Optional[str] = None
    days: list[DayPayload]


class ResponseEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    workout_plan: Optional[PlanPayload] = Field(default=None, alias="workoutPlan")
