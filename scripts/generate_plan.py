"""Generate a 14-day plan from the command line and store it as the current plan.

Example:
    python scripts/generate_plan.py "Build strength for hiking" --level beginner \
        --time "30-45 minutes" --location "at home"
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date

from fit14.config import get_settings
from fit14.db import init_db
from fit14.errors import Fit14Error, RateLimited
from fit14.logging_config import get_logger, setup_logging
from fit14.services.ai_client import PlanGenerationService
from fit14.services.goal_catalog import GoalDimension, find_option
from fit14.services.goal_data import GoalDataAggregate
from fit14.services.storage import PlanStore

logger = get_logger("fit14.scripts.generate_plan")

_FLAG_DIMENSIONS = {
    "level": GoalDimension.FITNESS_LEVEL,
    "sex": GoalDimension.SEX,
    "stats": GoalDimension.PHYSICAL_STATS,
    "time": GoalDimension.TIME_AVAILABLE,
    "location": GoalDimension.WORKOUT_LOCATION,
    "frequency": GoalDimension.WEEKLY_FREQUENCY,
}


def build_aggregate(args: argparse.Namespace) -> GoalDataAggregate:
    aggregate = GoalDataAggregate().update_free_text(args.goals)
    for flag, dimension in _FLAG_DIMENSIONS.items():
        value = getattr(args, flag)
        if not value:
            continue
        option = find_option(dimension, value)
        if option is not None and not option.allows_custom_input:
            aggregate = aggregate.set_selection(dimension, option=option)
        else:
            aggregate = aggregate.set_selection(dimension, custom_text=value)
    return aggregate


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a Fit14 workout plan")
    parser.add_argument("goals", help="Free-form description of your fitness goal")
    parser.add_argument("--level", help="beginner, intermediate or advanced")
    parser.add_argument("--sex")
    parser.add_argument("--stats", help="Height and weight, e.g. \"5'10\\\", 170 lbs\"")
    parser.add_argument("--time", help="Time per workout, e.g. \"30-45 minutes\"")
    parser.add_argument("--location", help="at home, at the gym, outdoors, ...")
    parser.add_argument("--frequency", help="Days per week, e.g. \"3 days\"")
    parser.add_argument("--start", type=date.fromisoformat, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--activate", action="store_true", help="Store the plan as active")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    init_db()

    aggregate = build_aggregate(args)
    store = PlanStore()
    store.save_goal_data(aggregate)

    service = PlanGenerationService(settings)
    try:
        plan = asyncio.run(service.generate(aggregate, start_date=args.start))
    except RateLimited as exc:
        print(f"{exc.user_message} {exc.reset_message}")
        return 2
    except Fit14Error as exc:
        logger.error("Plan generation failed: %s", exc)
        print(exc.user_message)
        return 1

    if args.activate:
        plan = plan.make_active()
    store.save_plan(plan)

    print(plan.display_title)
    for day in plan.days:
        exercises = ", ".join(f"{e.name} ({e.formatted_description})" for e in day.exercises)
        print(f"Day {day.day_number:>2} {day.date.isoformat()} {day.focus or ''}: {exercises}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
