"""Static registry of selectable options for each goal dimension."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImportanceTier(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    OPTIONAL = "optional"

    @property
    def rank(self) -> int:
        return {"critical": 0, "important": 1, "optional": 2}[self.value]


class GoalDimension(str, Enum):
    """Closed set of goal dimensions. Declaration order is the stable order."""

    FITNESS_LEVEL = "fitness_level"
    SEX = "sex"
    PHYSICAL_STATS = "physical_stats"
    TIME_AVAILABLE = "time_available"
    WORKOUT_LOCATION = "workout_location"
    WEEKLY_FREQUENCY = "weekly_frequency"

    @property
    def importance(self) -> ImportanceTier:
        return DIMENSION_IMPORTANCE[self]

    @property
    def display_title(self) -> str:
        return DIMENSION_TITLES[self]

    @property
    def prompt_context(self) -> str:
        return DIMENSION_PROMPT_CONTEXT[self]

    @property
    def is_required(self) -> bool:
        return self.importance is ImportanceTier.CRITICAL


DIMENSION_IMPORTANCE: dict[GoalDimension, ImportanceTier] = {
    GoalDimension.FITNESS_LEVEL: ImportanceTier.CRITICAL,
    GoalDimension.TIME_AVAILABLE: ImportanceTier.CRITICAL,
    GoalDimension.SEX: ImportanceTier.IMPORTANT,
    GoalDimension.WORKOUT_LOCATION: ImportanceTier.IMPORTANT,
    GoalDimension.PHYSICAL_STATS: ImportanceTier.OPTIONAL,
    GoalDimension.WEEKLY_FREQUENCY: ImportanceTier.OPTIONAL,
}

DIMENSION_TITLES: dict[GoalDimension, str] = {
    GoalDimension.FITNESS_LEVEL: "Fitness Level",
    GoalDimension.SEX: "Sex",
    GoalDimension.PHYSICAL_STATS: "Height & Weight",
    GoalDimension.TIME_AVAILABLE: "Time Per Workout",
    GoalDimension.WORKOUT_LOCATION: "Where You'll Work Out",
    GoalDimension.WEEKLY_FREQUENCY: "Days Per Week",
}

DIMENSION_PROMPT_CONTEXT: dict[GoalDimension, str] = {
    GoalDimension.FITNESS_LEVEL: "fitness experience level",
    GoalDimension.SEX: "biological sex for exercise planning",
    GoalDimension.PHYSICAL_STATS: "height and weight for personalization",
    GoalDimension.TIME_AVAILABLE: "available workout duration",
    GoalDimension.WORKOUT_LOCATION: "workout environment and space",
    GoalDimension.WEEKLY_FREQUENCY: "preferred workout frequency",
}


@dataclass(frozen=True)
class GoalOption:
    value: str
    display_text: str
    description: Optional[str] = None
    allows_custom_input: bool = False

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "displayText": self.display_text,
            "description": self.description,
            "allowsCustomInput": self.allows_custom_input,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GoalOption":
        return cls(
            value=data["value"],
            display_text=data["displayText"],
            description=data.get("description"),
            allows_custom_input=bool(data.get("allowsCustomInput", False)),
        )


CUSTOM_INPUT = GoalOption(value="custom", display_text="Other...", allows_custom_input=True)

CATALOG: dict[GoalDimension, tuple[GoalOption, ...]] = {
    GoalDimension.FITNESS_LEVEL: (
        GoalOption("beginner", "Beginner", "New to fitness or returning after a long break"),
        GoalOption("intermediate", "Intermediate", "Exercise regularly, comfortable with basic movements"),
        GoalOption("advanced", "Advanced", "Very experienced, ready for challenging workouts"),
    ),
    GoalDimension.SEX: (
        GoalOption("male", "Male"),
        GoalOption("female", "Female"),
        GoalOption("prefer not to say", "Prefer not to say"),
    ),
    GoalDimension.PHYSICAL_STATS: (
        GoalOption("custom", "Enter height & weight", "Tap to enter your measurements", allows_custom_input=True),
    ),
    GoalDimension.TIME_AVAILABLE: (
        GoalOption("15-30 minutes", "15-30 minutes", "Quick, efficient workouts"),
        GoalOption("30-45 minutes", "30-45 minutes", "Standard workout duration"),
        GoalOption("45-60 minutes", "45-60 minutes", "Longer, comprehensive sessions"),
        GoalOption("60+ minutes", "60+ minutes", "Extended training sessions"),
        CUSTOM_INPUT,
    ),
    GoalDimension.WORKOUT_LOCATION: (
        GoalOption("at home", "At Home", "Bodyweight and minimal equipment exercises"),
        GoalOption("at the gym", "At the Gym", "Full equipment access"),
        GoalOption("outdoors", "Outdoors", "Running, hiking, outdoor activities"),
        GoalOption("home and gym", "Home & Gym", "Flexible between locations"),
        CUSTOM_INPUT,
    ),
    GoalDimension.WEEKLY_FREQUENCY: (
        GoalOption("3 days", "3 days per week", "Balanced approach with recovery time"),
        GoalOption("4-5 days", "4-5 days per week", "Regular, consistent training"),
        GoalOption("6+ days", "6+ days per week", "High-frequency training"),
        GoalOption("flexible", "Flexible schedule", "Adapt based on availability"),
        CUSTOM_INPUT,
    ),
}

_DEFAULT_VALUES: dict[GoalDimension, str] = {
    GoalDimension.FITNESS_LEVEL: "beginner",
    GoalDimension.TIME_AVAILABLE: "30-45 minutes",
    GoalDimension.WORKOUT_LOCATION: "at home",
    GoalDimension.WEEKLY_FREQUENCY: "3 days",
}

FITNESS_LEVEL_ORDER = ["beginner", "intermediate", "advanced"]

_HEIGHT_TOKENS = ("ft", "cm", "'", "feet", "inch", '"')
_WEIGHT_TOKENS = ("lbs", "lb", "kg", "pounds", "kilos")
_TIME_TOKENS = ("min", "hour", "hr")


def options_for(dimension: GoalDimension) -> list[GoalOption]:
    return list(CATALOG[dimension])


def find_option(dimension: GoalDimension, value: str) -> Optional[GoalOption]:
    key = (value or "").strip().lower()
    for option in CATALOG[dimension]:
        if option.value == key:
            return option
    return None


def default_option_for(dimension: GoalDimension) -> Optional[GoalOption]:
    preferred = _DEFAULT_VALUES.get(dimension)
    if preferred is not None:
        return find_option(dimension, preferred)
    options = CATALOG[dimension]
    return options[0] if options else None


def dimensions_by_importance() -> list[GoalDimension]:
    # sorted() is stable, so ties keep declaration order
    return sorted(GoalDimension, key=lambda d: d.importance.rank)


def validate_custom_input(dimension: GoalDimension, text: str) -> list[str]:
    """Return user-facing problems with a free-form value for ``dimension``."""
    lowered = (text or "").strip().lower()
    if not lowered:
        return ["No value selected"]
    errors: list[str] = []
    if dimension is GoalDimension.PHYSICAL_STATS:
        has_height = any(token in lowered for token in _HEIGHT_TOKENS)
        has_weight = any(token in lowered for token in _WEIGHT_TOKENS)
        if not has_height and not has_weight:
            errors.append("Please include your height or weight (e.g., '5'6\", 140 lbs')")
    elif dimension is GoalDimension.TIME_AVAILABLE:
        if not any(token in lowered for token in _TIME_TOKENS):
            errors.append("Please specify time units (e.g., '45 minutes', '1 hour')")
    return errors


def smart_defaults(text: str) -> dict[GoalDimension, GoalOption]:
    """Infer likely selections from keywords in the free-form goal text."""
    lowered = (text or "").lower()
    defaults: dict[GoalDimension, GoalOption] = {}

    if "beginner" in lowered or "new to" in lowered:
        defaults[GoalDimension.FITNESS_LEVEL] = find_option(GoalDimension.FITNESS_LEVEL, "beginner")
    elif "experienced" in lowered or "advanced" in lowered:
        defaults[GoalDimension.FITNESS_LEVEL] = find_option(GoalDimension.FITNESS_LEVEL, "advanced")

    if "home" in lowered or "no gym" in lowered:
        defaults[GoalDimension.WORKOUT_LOCATION] = find_option(GoalDimension.WORKOUT_LOCATION, "at home")
    elif "gym" in lowered:
        defaults[GoalDimension.WORKOUT_LOCATION] = find_option(GoalDimension.WORKOUT_LOCATION, "at the gym")

    return defaults
