"""Turn the AI service's JSON response into a WorkoutPlan.

Validation is strict: malformed JSON, a missing plan object or broken day
numbering fail the whole response. A single bad exercise is dropped and
reported; the day-count repair lives in ``plan_normalizer``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from fit14.errors import ExerciseValidationError, InvalidResponse, ServiceError
from fit14.services.plan_normalizer import PLAN_LENGTH_DAYS, normalize_days, truncate_days
from fit14.services.workout_plan import MAX_SETS, Day, Exercise, ExerciseUnit, WorkoutPlan
from fit14.validators import DayPayload, ExercisePayload, PlanPayload, ResponseEnvelope

logger = logging.getLogger(__name__)

GENERIC_SERVICE_FAILURE = "The AI service could not create your plan."

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


@dataclass(frozen=True)
class ParsedPlan:
    plan: WorkoutPlan
    rejected_exercises: list[ExerciseValidationError] = field(default_factory=list)


def clean_response_text(text: str) -> str:
    """Strip markdown code fences and surrounding whitespace."""
    return _FENCE_RE.sub("", text).strip()


def _load(raw: Union[str, bytes, Mapping[str, Any]]) -> dict:
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        data = json.loads(clean_response_text(raw))
    except (TypeError, json.JSONDecodeError) as exc:
        raise InvalidResponse(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidResponse("Response JSON is not an object")
    return data


def _extract_plan(data: dict) -> PlanPayload:
    if data.get("success") is False:
        message = data.get("message") or data.get("error")
        raise ServiceError(message if isinstance(message, str) and message else GENERIC_SERVICE_FAILURE)
    try:
        if "success" in data:
            envelope = ResponseEnvelope.model_validate(data)
            if not envelope.success:
                raise ServiceError(envelope.message or envelope.error or GENERIC_SERVICE_FAILURE)
            if envelope.workout_plan is None:
                raise InvalidResponse("Response envelope has no workoutPlan")
            return envelope.workout_plan
        if "days" not in data:
            raise InvalidResponse("Response has no plan object")
        return PlanPayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidResponse(f"Response does not match the plan schema: {exc}") from exc


def _check_day_numbers(days: list[DayPayload]) -> None:
    for expected, day in enumerate(days, start=1):
        if day.day_number != expected:
            raise InvalidResponse(
                f"Day at position {expected} has dayNumber {day.day_number}, expected {expected}"
            )


def _field_of(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors or not errors[0].get("loc"):
        return ""
    return str(errors[0]["loc"][0])


def _build_exercise(raw: Any, day_number: int) -> Exercise:
    name = raw.get("name", "") if isinstance(raw, dict) else ""
    try:
        payload = ExercisePayload.model_validate(raw)
    except ValidationError as exc:
        bad_field = _field_of(exc)
        value = raw.get(bad_field) if isinstance(raw, dict) and bad_field else raw
        raise ExerciseValidationError(
            f"Invalid exercise {name!r} on day {day_number}: {exc.errors()[0]['msg']}",
            day_number=day_number,
            exercise_name=str(name),
            field=bad_field,
            value=value,
        ) from exc
    quantity = _fit_quantity(payload.name, payload.quantity, payload.unit, day_number)
    sets = payload.sets
    if sets > MAX_SETS:
        logger.warning(
            "Capping %d sets of %r at %d", sets, payload.name, MAX_SETS,
            extra={"ctx_day_number": day_number},
        )
        sets = MAX_SETS
    return Exercise(name=payload.name, sets=sets, quantity=quantity, unit=payload.unit)


def _fit_quantity(name: str, quantity: int, unit: ExerciseUnit, day_number: int) -> int:
    """Pull an implausible quantity back into the unit's suggested range."""
    if unit.is_valid_quantity(quantity):
        return quantity
    low, high = unit.suggested_range
    fitted = max(low, min(high, quantity))
    logger.warning(
        "Quantity %d %s for %r is out of range, using %d", quantity, unit.value, name, fitted,
        extra={"ctx_day_number": day_number, "ctx_unit": unit.value},
    )
    return fitted


def _build_day(
    payload: DayPayload, start_date: date, rejected: list[ExerciseValidationError]
) -> Day:
    exercises = []
    for raw in payload.exercises:
        try:
            exercises.append(_build_exercise(raw, payload.day_number))
        except ExerciseValidationError as exc:
            logger.warning(
                "Dropping invalid exercise: %s", exc,
                extra={"ctx_day_number": exc.day_number, "ctx_field": exc.field},
            )
            rejected.append(exc)
    return Day(
        day_number=payload.day_number,
        date=start_date + timedelta(days=payload.day_number - 1),
        exercises=tuple(exercises),
        focus=payload.focus,
    )


def parse_plan_response(
    raw: Union[str, bytes, Mapping[str, Any]],
    user_goals_text: str,
    start_date: Optional[date] = None,
    goal_profile: Optional[Mapping[str, str]] = None,
    length: int = PLAN_LENGTH_DAYS,
) -> ParsedPlan:
    """Parse and normalize a response, keeping the exercises that were rejected."""
    start = start_date or date.today()
    plan_payload = _extract_plan(_load(raw))

    day_payloads = truncate_days(plan_payload.days, length)
    _check_day_numbers(day_payloads)

    rejected: list[ExerciseValidationError] = []
    days = [_build_day(d, start, rejected) for d in day_payloads]

    plan = WorkoutPlan(
        user_goals_text=user_goals_text,
        days=tuple(normalize_days(days, start, length)),
        plan_title=plan_payload.plan_title,
        summary=plan_payload.summary,
        goal_profile=dict(goal_profile or {}),
    )
    logger.info(
        "Parsed plan with %d days (%d exercises rejected)", len(plan.days), len(rejected),
        extra={"ctx_plan_id": str(plan.id), "ctx_rejected": len(rejected)},
    )
    return ParsedPlan(plan=plan, rejected_exercises=rejected)


def parse_response(
    raw: Union[str, bytes, Mapping[str, Any]],
    user_goals_text: str,
    start_date: Optional[date] = None,
    goal_profile: Optional[Mapping[str, str]] = None,
) -> WorkoutPlan:
    return parse_plan_response(raw, user_goals_text, start_date, goal_profile).plan
