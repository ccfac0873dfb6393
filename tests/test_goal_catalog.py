from fit14.services.goal_catalog import (
    CUSTOM_INPUT,
    GoalDimension,
    GoalOption,
    ImportanceTier,
    default_option_for,
    dimensions_by_importance,
    find_option,
    options_for,
    smart_defaults,
    validate_custom_input,
)


def test_dimension_order_is_stable():
    assert [d.value for d in GoalDimension] == [
        "fitness_level", "sex", "physical_stats", "time_available", "workout_location", "weekly_frequency",
    ]


def test_importance_tiers():
    assert GoalDimension.FITNESS_LEVEL.importance is ImportanceTier.CRITICAL
    assert GoalDimension.TIME_AVAILABLE.is_required
    assert GoalDimension.SEX.importance is ImportanceTier.IMPORTANT
    assert not GoalDimension.WEEKLY_FREQUENCY.is_required


def test_dimensions_by_importance_critical_first_ties_in_declaration_order():
    assert dimensions_by_importance() == [
        GoalDimension.FITNESS_LEVEL,
        GoalDimension.TIME_AVAILABLE,
        GoalDimension.SEX,
        GoalDimension.WORKOUT_LOCATION,
        GoalDimension.PHYSICAL_STATS,
        GoalDimension.WEEKLY_FREQUENCY,
    ]


def test_options_for_display_order_and_custom_last():
    options = options_for(GoalDimension.TIME_AVAILABLE)
    assert options[0].value == "15-30 minutes"
    assert options[-1] == CUSTOM_INPUT


def test_defaults():
    assert default_option_for(GoalDimension.FITNESS_LEVEL).value == "beginner"
    assert default_option_for(GoalDimension.TIME_AVAILABLE).value == "30-45 minutes"
    assert default_option_for(GoalDimension.WORKOUT_LOCATION).value == "at home"
    assert default_option_for(GoalDimension.WEEKLY_FREQUENCY).value == "3 days"
    assert default_option_for(GoalDimension.SEX).value == "male"


def test_find_option_is_case_insensitive():
    assert find_option(GoalDimension.FITNESS_LEVEL, " Advanced ").value == "advanced"
    assert find_option(GoalDimension.FITNESS_LEVEL, "elite") is None


def test_option_round_trip():
    option = GoalOption("at home", "At Home", "Bodyweight", False)
    assert GoalOption.from_dict(option.to_dict()) == option
    assert option.to_dict()["displayText"] == "At Home"


def test_validate_custom_input_physical_stats():
    assert validate_custom_input(GoalDimension.PHYSICAL_STATS, "5'10\", 170 lbs") == []
    assert validate_custom_input(GoalDimension.PHYSICAL_STATS, "140 lbs") == []
    assert validate_custom_input(GoalDimension.PHYSICAL_STATS, "tall")[0].startswith("Please include your height or weight")
    assert validate_custom_input(GoalDimension.PHYSICAL_STATS, "  ") == ["No value selected"]


def test_validate_custom_input_time():
    assert validate_custom_input(GoalDimension.TIME_AVAILABLE, "50 minutes") == []
    assert validate_custom_input(GoalDimension.TIME_AVAILABLE, "a while") != []
    assert validate_custom_input(GoalDimension.WORKOUT_LOCATION, "park") == []


def test_smart_defaults_from_text():
    defaults = smart_defaults("I'm new to lifting and have no gym access")
    assert defaults[GoalDimension.FITNESS_LEVEL].value == "beginner"
    assert defaults[GoalDimension.WORKOUT_LOCATION].value == "at home"

    defaults = smart_defaults("Experienced runner who trains at the gym")
    assert defaults[GoalDimension.FITNESS_LEVEL].value == "advanced"
    assert defaults[GoalDimension.WORKOUT_LOCATION].value == "at the gym"

    assert smart_defaults("get fit") == {}
