from fit14.services.goal_catalog import GoalDimension, find_option
from fit14.services.goal_data import GoalDataAggregate
from fit14.services.prompt_builder import (
    NO_PROFILE_LINE,
    PROMPT_VERSION,
    build_prompt,
    build_regeneration_prompt,
)
from fit14.services.workout_plan import ExerciseUnit


def _aggregate(text="Build endurance for a 10k"):
    return (
        GoalDataAggregate()
        .update_free_text(text)
        .set_selection(GoalDimension.WORKOUT_LOCATION, find_option(GoalDimension.WORKOUT_LOCATION, "outdoors"))
        .set_selection(GoalDimension.FITNESS_LEVEL, find_option(GoalDimension.FITNESS_LEVEL, "intermediate"))
    )


def test_prompt_is_deterministic():
    agg = _aggregate()
    assert build_prompt(agg) == build_prompt(agg)


def test_profile_block_in_stable_dimension_order():
    prompt = build_prompt(_aggregate())
    level = prompt.index("- Fitness Level: intermediate")
    location = prompt.index("- Where You'll Work Out: outdoors")
    assert level < location


def test_goals_block_uses_free_text():
    assert "Build endurance for a 10k" in build_prompt(_aggregate())


def test_goals_block_falls_back_to_phrases():
    agg = GoalDataAggregate().set_selection(
        GoalDimension.FITNESS_LEVEL, find_option(GoalDimension.FITNESS_LEVEL, "beginner")
    )
    assert "- I'm a beginner" in build_prompt(agg)


def test_empty_profile_line():
    agg = GoalDataAggregate().update_free_text("Move more")
    assert NO_PROFILE_LINE in build_prompt(agg)


def test_prompt_states_parser_constraints():
    prompt = build_prompt(_aggregate())
    assert "exactly 14 days" in prompt
    assert "numbered 1 to 14" in prompt
    assert "1-2 rest or active recovery days" in prompt
    assert "4-6 exercises" in prompt
    assert "positive integer" in prompt
    assert "Never use weight units" in prompt
    assert "no code fences" in prompt
    for unit in ExerciseUnit:
        assert f'"{unit.value}"' in prompt


def test_regeneration_prompt_wraps_base_prompt():
    agg = _aggregate()
    regen = build_regeneration_prompt(agg)
    assert regen.startswith("You are regenerating")
    assert regen.endswith(build_prompt(agg))


def test_prompt_version_is_semver():
    assert len(PROMPT_VERSION.split(".")) == 3
