"""Immutable snapshots of finished challenges."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from fit14.services import progress
from fit14.services.workout_plan import Day, Exercise, ExerciseUnit, WorkoutPlan


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExerciseCompletionRecord:
    exercise_name: str
    sets: int
    quantity: int
    unit: ExerciseUnit
    is_completed: bool
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "ExerciseCompletionRecord":
        return cls(
            exercise_name=exercise.name,
            sets=exercise.sets,
            quantity=exercise.quantity,
            unit=exercise.unit,
            is_completed=exercise.is_completed,
        )

    @property
    def display_string(self) -> str:
        return f"{self.sets} x {self.quantity} {self.unit.value} {self.exercise_name}"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "exerciseName": self.exercise_name,
            "sets": self.sets,
            "quantity": self.quantity,
            "unit": self.unit.value,
            "isCompleted": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseCompletionRecord":
        return cls(
            id=UUID(data["id"]),
            exercise_name=data["exerciseName"],
            sets=data["sets"],
            quantity=data["quantity"],
            unit=ExerciseUnit(data["unit"]),
            is_completed=bool(data["isCompleted"]),
        )


@dataclass(frozen=True)
class DayCompletionRecord:
    day_number: int
    date: date
    total_exercises: int
    completed_exercises: int
    exercise_completion_record: tuple[ExerciseCompletionRecord, ...] = ()
    focus: Optional[str] = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "exercise_completion_record", tuple(self.exercise_completion_record))

    @classmethod
    def from_day(cls, day: Day) -> "DayCompletionRecord":
        return cls(
            day_number=day.day_number,
            date=day.date,
            focus=day.focus,
            total_exercises=len(day.exercises),
            completed_exercises=day.completed_exercise_count,
            exercise_completion_record=tuple(
                ExerciseCompletionRecord.from_exercise(e) for e in day.exercises
            ),
        )

    @property
    def is_completed(self) -> bool:
        return self.total_exercises > 0 and self.completed_exercises == self.total_exercises

    @property
    def is_perfect_day(self) -> bool:
        return self.is_completed

    @property
    def is_missed_day(self) -> bool:
        return self.completed_exercises == 0

    @property
    def is_partial_day(self) -> bool:
        return 0 < self.completed_exercises < self.total_exercises

    @property
    def completion_percentage(self) -> float:
        return progress.percentage(self.completed_exercises, self.total_exercises)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "dayNumber": self.day_number,
            "date": self.date.isoformat(),
            "focus": self.focus,
            "totalExercises": self.total_exercises,
            "completedExercises": self.completed_exercises,
            "exerciseCompletionRecord": [r.to_dict() for r in self.exercise_completion_record],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DayCompletionRecord":
        return cls(
            id=UUID(data["id"]),
            day_number=data["dayNumber"],
            date=date.fromisoformat(data["date"]),
            focus=data.get("focus"),
            total_exercises=data["totalExercises"],
            completed_exercises=data["completedExercises"],
            exercise_completion_record=tuple(
                ExerciseCompletionRecord.from_dict(r) for r in data.get("exerciseCompletionRecord", [])
            ),
        )


@dataclass(frozen=True)
class CompletedChallenge:
    original_plan_id: UUID
    challenge_title: str
    user_goals: str
    start_date: date
    completion_date: date
    total_days: int
    completed_days: int
    total_exercises: int
    completed_exercises: int
    daily_completion_record: tuple[DayCompletionRecord, ...] = ()
    goal_profile: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        object.__setattr__(self, "daily_completion_record", tuple(self.daily_completion_record))
        object.__setattr__(self, "goal_profile", dict(self.goal_profile))

    @property
    def success_rate(self) -> float:
        return progress.percentage(self.completed_days, self.total_days)

    @property
    def exercise_completion_percentage(self) -> float:
        return progress.percentage(self.completed_exercises, self.total_exercises)

    @property
    def perfect_days(self) -> int:
        return sum(1 for r in self.daily_completion_record if r.is_perfect_day)

    @property
    def partial_days(self) -> int:
        return sum(1 for r in self.daily_completion_record if r.is_partial_day)

    @property
    def missed_days(self) -> int:
        return sum(1 for r in self.daily_completion_record if r.is_missed_day)

    @property
    def longest_streak(self) -> int:
        return progress.longest_streak(self)

    @property
    def most_consistent_week(self) -> int:
        return progress.most_consistent_week(self)

    @property
    def is_fully_completed(self) -> bool:
        return self.completed_days == self.total_days

    @property
    def challenge_duration(self) -> int:
        return max((self.completion_date - self.start_date).days, 0)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "originalPlanId": str(self.original_plan_id),
            "challengeTitle": self.challenge_title,
            "userGoals": self.user_goals,
            "startDate": self.start_date.isoformat(),
            "completionDate": self.completion_date.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "totalDays": self.total_days,
            "completedDays": self.completed_days,
            "totalExercises": self.total_exercises,
            "completedExercises": self.completed_exercises,
            "goalProfile": dict(self.goal_profile),
            "dailyCompletionRecord": [r.to_dict() for r in self.daily_completion_record],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedChallenge":
        return cls(
            id=UUID(data["id"]),
            original_plan_id=UUID(data["originalPlanId"]),
            challenge_title=data["challengeTitle"],
            user_goals=data["userGoals"],
            start_date=date.fromisoformat(data["startDate"]),
            completion_date=date.fromisoformat(data["completionDate"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
            total_days=data["totalDays"],
            completed_days=data["completedDays"],
            total_exercises=data["totalExercises"],
            completed_exercises=data["completedExercises"],
            goal_profile=dict(data.get("goalProfile") or {}),
            daily_completion_record=tuple(
                DayCompletionRecord.from_dict(r) for r in data.get("dailyCompletionRecord", [])
            ),
        )


def archive(plan: WorkoutPlan, completion_date: Optional[date] = None) -> CompletedChallenge:
    """Snapshot ``plan`` into a CompletedChallenge. The plan itself is untouched."""
    return CompletedChallenge(
        original_plan_id=plan.id,
        challenge_title=plan.summary or plan.plan_title or plan.user_goals_text,
        user_goals=plan.user_goals_text,
        start_date=plan.start_date or plan.created_at.date(),
        completion_date=completion_date or date.today(),
        total_days=progress.total_days(plan),
        completed_days=progress.completed_days(plan),
        total_exercises=progress.total_exercises(plan),
        completed_exercises=progress.completed_exercises(plan),
        goal_profile=dict(plan.goal_profile),
        daily_completion_record=tuple(DayCompletionRecord.from_day(d) for d in plan.days),
    )
