"""Workout plan value types: exercise units, exercises, days and plans.

All types are frozen. Edits go through ``updated``/``with_*`` methods that
return copies and keep ids stable, so a plan shared between callers is never
mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, Optional
from uuid import UUID, uuid4

from fit14.errors import InvalidInput, PlanLockedError


class ExerciseUnit(str, Enum):
    REPS = "reps"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    METERS = "meters"
    YARDS = "yards"
    FEET = "feet"
    KILOMETERS = "kilometers"
    MILES = "miles"
    STEPS = "steps"
    LAPS = "laps"

    @property
    def category(self) -> str:
        if self in _COUNT_UNITS:
            return "count"
        if self in _TIME_UNITS:
            return "time"
        return "distance"

    @property
    def short_display_name(self) -> str:
        return _SHORT_NAMES.get(self, self.value)

    @property
    def max_quantity(self) -> int:
        return _MAX_QUANTITY[self]

    @property
    def suggested_range(self) -> tuple[int, int]:
        return _SUGGESTED_RANGE[self]

    def is_valid_quantity(self, quantity: int) -> bool:
        return 0 < quantity <= self.max_quantity

    def display_name_for(self, quantity: int) -> str:
        if quantity == 1 and self is ExerciseUnit.HOURS:
            return "hour"
        if quantity == 1 and self is ExerciseUnit.FEET:
            return "foot"
        return self.value

    @classmethod
    def parse(cls, raw: Any) -> "ExerciseUnit":
        """Resolve a unit string, accepting known abbreviations and singular forms.

        Raises ValueError for anything outside the closed set.
        """
        key = str(raw or "").strip().lower()
        key = UNIT_ALIASES.get(key, key)
        return cls(key)


_COUNT_UNITS = {ExerciseUnit.REPS, ExerciseUnit.STEPS, ExerciseUnit.LAPS}
_TIME_UNITS = {ExerciseUnit.SECONDS, ExerciseUnit.MINUTES, ExerciseUnit.HOURS}

_SHORT_NAMES = {
    ExerciseUnit.SECONDS: "sec",
    ExerciseUnit.MINUTES: "min",
    ExerciseUnit.HOURS: "hr",
    ExerciseUnit.METERS: "m",
    ExerciseUnit.YARDS: "yd",
    ExerciseUnit.FEET: "ft",
    ExerciseUnit.KILOMETERS: "km",
    ExerciseUnit.MILES: "mi",
}

_MAX_QUANTITY = {
    ExerciseUnit.REPS: 1000,
    ExerciseUnit.STEPS: 100000,
    ExerciseUnit.LAPS: 200,
    ExerciseUnit.SECONDS: 3600,
    ExerciseUnit.MINUTES: 180,
    ExerciseUnit.HOURS: 12,
    ExerciseUnit.METERS: 10000,
    ExerciseUnit.YARDS: 10000,
    ExerciseUnit.FEET: 10000,
    ExerciseUnit.KILOMETERS: 100,
    ExerciseUnit.MILES: 50,
}

_SUGGESTED_RANGE = {
    ExerciseUnit.REPS: (1, 50),
    ExerciseUnit.STEPS: (100, 20000),
    ExerciseUnit.LAPS: (1, 50),
    ExerciseUnit.SECONDS: (10, 300),
    ExerciseUnit.MINUTES: (1, 120),
    ExerciseUnit.HOURS: (1, 4),
    ExerciseUnit.METERS: (50, 5000),
    ExerciseUnit.YARDS: (50, 3000),
    ExerciseUnit.FEET: (10, 1000),
    ExerciseUnit.KILOMETERS: (1, 25),
    ExerciseUnit.MILES: (1, 15),
}

# Spellings the generator uses despite instructions. Weight units are deliberately absent.
UNIT_ALIASES: dict[str, str] = {
    "rep": "reps",
    "repetitions": "reps",
    "sec": "seconds",
    "secs": "seconds",
    "second": "seconds",
    "min": "minutes",
    "mins": "minutes",
    "minute": "minutes",
    "hr": "hours",
    "hrs": "hours",
    "hour": "hours",
    "m": "meters",
    "meter": "meters",
    "yd": "yards",
    "yds": "yards",
    "yard": "yards",
    "ft": "feet",
    "foot": "feet",
    "km": "kilometers",
    "kilometer": "kilometers",
    "mi": "miles",
    "mile": "miles",
    "step": "steps",
    "lap": "laps",
}

MAX_SETS = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class Exercise:
    name: str
    sets: int
    quantity: int
    unit: ExerciseUnit = ExerciseUnit.REPS
    is_completed: bool = False
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if not _is_positive_int(self.sets):
            raise InvalidInput(f"Sets must be a positive whole number, got {self.sets!r}")
        if not _is_positive_int(self.quantity):
            raise InvalidInput(f"Quantity must be a positive whole number, got {self.quantity!r}")
        if not isinstance(self.unit, ExerciseUnit):
            object.__setattr__(self, "unit", ExerciseUnit(self.unit))

    def updated(self, **changes: Any) -> "Exercise":
        if "id" in changes:
            raise TypeError("Exercise id cannot change")
        return replace(self, **changes)

    def toggled(self) -> "Exercise":
        return replace(self, is_completed=not self.is_completed)

    @property
    def formatted_description(self) -> str:
        return f"{self.sets} sets × {self.quantity} {self.unit.short_display_name}"

    @property
    def detailed_description(self) -> str:
        unit_name = self.unit.display_name_for(self.quantity)
        if self.sets == 1:
            return f"{self.quantity} {unit_name}"
        return f"{self.sets} sets × {self.quantity} {unit_name}"

    def validation_issues(self) -> list[str]:
        issues: list[str] = []
        if not self.name.strip():
            issues.append("Exercise name cannot be empty")
        if self.sets > MAX_SETS:
            issues.append(f"Sets should be {MAX_SETS} or fewer")
        if not self.unit.is_valid_quantity(self.quantity):
            issues.append(f"Quantity seems too high for {self.unit.value}")
        return issues

    @property
    def is_valid(self) -> bool:
        return not self.validation_issues()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "sets": self.sets,
            "quantity": self.quantity,
            "unit": self.unit.value,
            "isCompleted": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        return cls(
            id=UUID(data["id"]),
            name=data["name"],
            sets=data["sets"],
            quantity=data["quantity"],
            unit=ExerciseUnit(data["unit"]),
            is_completed=bool(data.get("isCompleted", False)),
        )


@dataclass(frozen=True)
class Day:
    day_number: int
    date: date
    exercises: tuple[Exercise, ...] = ()
    focus: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "exercises", tuple(self.exercises))

    @property
    def is_completed(self) -> bool:
        return bool(self.exercises) and all(e.is_completed for e in self.exercises)

    @property
    def completed_exercise_count(self) -> int:
        return sum(1 for e in self.exercises if e.is_completed)

    def is_past_due(self, today: Optional[date] = None) -> bool:
        return self.date < (today or date.today())

    def is_missed(self, today: Optional[date] = None) -> bool:
        return self.is_past_due(today) and not self.is_completed

    def days_from_today(self, today: Optional[date] = None) -> int:
        """Days elapsed since this day's date (negative for future days)."""
        return ((today or date.today()) - self.date).days

    def is_available_for_catch_up(self, today: Optional[date] = None, window_days: int = 14) -> bool:
        """A missed day can be made up while it is still inside the challenge window."""
        return self.is_missed(today) and self.days_from_today(today) < window_days

    def is_today(self, today: Optional[date] = None) -> bool:
        return self.date == (today or date.today())

    def get_exercise(self, exercise_id: UUID) -> Optional[Exercise]:
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def updated(self, **changes: Any) -> "Day":
        if "id" in changes:
            raise TypeError("Day id cannot change")
        return replace(self, **changes)

    def adding_exercise(self, exercise: Exercise) -> "Day":
        return replace(self, exercises=self.exercises + (exercise,))

    def removing_exercise(self, exercise_id: UUID) -> "Day":
        return replace(self, exercises=tuple(e for e in self.exercises if e.id != exercise_id))

    def updating_exercise(self, exercise: Exercise) -> "Day":
        if self.get_exercise(exercise.id) is None:
            raise InvalidInput(f"Exercise {exercise.id} is not part of day {self.day_number}")
        return replace(
            self,
            exercises=tuple(exercise if e.id == exercise.id else e for e in self.exercises),
        )

    def toggling_exercise(self, exercise_id: UUID) -> "Day":
        current = self.get_exercise(exercise_id)
        if current is None:
            raise InvalidInput(f"Exercise {exercise_id} is not part of day {self.day_number}")
        return self.updating_exercise(current.toggled())

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "dayNumber": self.day_number,
            "date": self.date.isoformat(),
            "focus": self.focus,
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Day":
        return cls(
            id=UUID(data["id"]),
            day_number=data["dayNumber"],
            date=date.fromisoformat(data["date"]),
            focus=data.get("focus"),
            exercises=tuple(Exercise.from_dict(e) for e in data.get("exercises", [])),
        )


class PlanStatus(str, Enum):
    SUGGESTED = "suggested"
    ACTIVE = "active"


@dataclass(frozen=True)
class WorkoutPlan:
    user_goals_text: str
    days: tuple[Day, ...] = ()
    plan_title: Optional[str] = None
    summary: Optional[str] = None
    status: PlanStatus = PlanStatus.SUGGESTED
    created_at: datetime = field(default_factory=_utcnow)
    goal_profile: dict[str, str] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(self.days))
        object.__setattr__(self, "goal_profile", dict(self.goal_profile))

    @property
    def is_suggested(self) -> bool:
        return self.status is PlanStatus.SUGGESTED

    @property
    def is_active(self) -> bool:
        return self.status is PlanStatus.ACTIVE

    @property
    def display_title(self) -> str:
        return self.plan_title or self.summary or self.user_goals_text

    @property
    def start_date(self) -> Optional[date]:
        return min((d.date for d in self.days), default=None)

    @property
    def is_valid(self) -> bool:
        if not self.user_goals_text.strip() or not self.days:
            return False
        for index, day in enumerate(self.days, start=1):
            if day.day_number != index or not day.exercises:
                return False
        return True

    def get_day(self, day_id: UUID) -> Optional[Day]:
        return next((d for d in self.days if d.id == day_id), None)

    def get_exercise(self, day_id: UUID, exercise_id: UUID) -> Optional[Exercise]:
        day = self.get_day(day_id)
        return day.get_exercise(exercise_id) if day else None

    # -- Status transition --

    def make_active(self) -> "WorkoutPlan":
        if self.is_active:
            return self
        return replace(self, status=PlanStatus.ACTIVE)

    # -- Edits --

    def _require_editable(self) -> None:
        if self.is_active:
            raise PlanLockedError(f"Plan {self.id} is active and can no longer be edited")

    def _replace_day(self, day_id: UUID, build) -> "WorkoutPlan":
        index = next((i for i, d in enumerate(self.days) if d.id == day_id), None)
        if index is None:
            raise InvalidInput(f"Day {day_id} is not part of plan {self.id}")
        days = list(self.days)
        days[index] = build(days[index])
        return replace(self, days=tuple(days))

    def with_days(self, days: Iterable[Day]) -> "WorkoutPlan":
        self._require_editable()
        return replace(self, days=tuple(days))

    def with_modified_day(self, day_id: UUID, new_day: Day) -> "WorkoutPlan":
        """Replace a day's content while keeping its id, number and date."""
        self._require_editable()
        return self._replace_day(
            day_id,
            lambda old: replace(new_day, id=old.id, day_number=old.day_number, date=old.date),
        )

    def with_exercise_added(self, day_id: UUID, exercise: Exercise) -> "WorkoutPlan":
        self._require_editable()
        return self._replace_day(day_id, lambda day: day.adding_exercise(exercise))

    def with_exercise_removed(self, day_id: UUID, exercise_id: UUID) -> "WorkoutPlan":
        self._require_editable()
        return self._replace_day(day_id, lambda day: day.removing_exercise(exercise_id))

    def with_exercise_updated(self, day_id: UUID, exercise: Exercise) -> "WorkoutPlan":
        self._require_editable()
        return self._replace_day(day_id, lambda day: day.updating_exercise(exercise))

    def with_exercise_toggled(self, day_id: UUID, exercise_id: UUID) -> "WorkoutPlan":
        return self._replace_day(day_id, lambda day: day.toggling_exercise(exercise_id))

    # -- Serialization --

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "userGoalsText": self.user_goals_text,
            "planTitle": self.plan_title,
            "summary": self.summary,
            "createdAt": self.created_at.isoformat(),
            "status": self.status.value,
            "goalProfile": dict(self.goal_profile),
            "days": [d.to_dict() for d in self.days],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutPlan":
        return cls(
            id=UUID(data["id"]),
            user_goals_text=data["userGoalsText"],
            plan_title=data.get("planTitle"),
            summary=data.get("summary"),
            created_at=datetime.fromisoformat(data["createdAt"]),
            status=PlanStatus(data.get("status", PlanStatus.SUGGESTED.value)),
            goal_profile=dict(data.get("goalProfile") or {}),
            days=tuple(Day.from_dict(d) for d in data.get("days", [])),
        )


def dates_from(start: date, count: int) -> list[date]:
    return [start + timedelta(days=offset) for offset in range(count)]
