"""Prompt construction for plan generation.

The template spells out every rule the response parser depends on, so a
change to the parser's contract has to be mirrored here.
"""

from __future__ import annotations

from fit14.services.goal_data import GoalDataAggregate
from fit14.services.workout_plan import ExerciseUnit

PROMPT_VERSION = "1.3.0"

NO_PROFILE_LINE = "No profile details provided."

_ALLOWED_UNITS = ", ".join(f'"{u.value}"' for u in ExerciseUnit)

WORKOUT_PROMPT_TEMPLATE = """\
You are a professional fitness trainer creating a personalized 14-day workout plan.
Your response is parsed automatically, so the JSON format below must be followed exactly.

USER PROFILE:
{profile}

USER GOALS:
{goals}

PLAN REQUIREMENTS:
- Return exactly 14 days, numbered 1 to 14 sequentially with no gaps or repeats
- Include 1-2 rest or active recovery days
- Rest/recovery days have 1-3 light activities of 15-30 minutes each
- Regular workout days have 4-6 exercises
- Match exercises to the user's experience level, time and location
- Make the days progressive and varied

NUMERIC FIELDS:
- "sets" must always be a positive integer (1, 2, 3, ...)
- "quantity" must always be a positive integer; never text, never decimals
- For "as many as possible" exercises use a concrete number such as 10

UNITS:
- "unit" must be exactly one of: {units}
- Never use weight units (lbs, kg, pounds, kilograms) and never specify weights

RESPONSE FORMAT:
{{
  "planTitle": "Short plan title",
  "summary": "Brief description of the plan",
  "days": [
    {{
      "dayNumber": 1,
      "focus": "Upper Body Strength",
      "exercises": [
        {{"name": "Push-ups", "sets": 3, "quantity": 12, "unit": "reps"}},
        {{"name": "Plank Hold", "sets": 3, "quantity": 30, "unit": "seconds"}}
      ]
    }}
  ]
}}

Return ONLY pure JSON. No prose, no explanations, no markdown, no code fences.
Start the response with {{ and end it with }}.
"""

REGENERATION_PREAMBLE = """\
You are regenerating a workout plan. Create a fresh 14-day plan that is different
from the previous one while keeping the same quality, structure and rules.

"""


def profile_block(aggregate: GoalDataAggregate) -> str:
    lines = [
        f"- {s.dimension.display_title}: {s.effective_value()}"
        for s in aggregate.valid_selections()
    ]
    return "\n".join(lines) if lines else NO_PROFILE_LINE


def goals_block(aggregate: GoalDataAggregate) -> str:
    if aggregate.has_free_text:
        return aggregate.free_text.strip()
    return "\n".join(f"- {phrase}" for phrase in aggregate.selection_phrases())


def build_prompt(aggregate: GoalDataAggregate) -> str:
    """Render the generation prompt. Deterministic for a given aggregate."""
    return WORKOUT_PROMPT_TEMPLATE.format(
        profile=profile_block(aggregate),
        goals=goals_block(aggregate),
        units=_ALLOWED_UNITS,
    )


def build_regeneration_prompt(aggregate: GoalDataAggregate) -> str:
    return REGENERATION_PREAMBLE + build_prompt(aggregate)
