"""Tests for PlanStore against an in-memory SQLite database."""

from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import update

from fit14.db import init_db, make_engine, make_session_factory, session_scope
from fit14.errors import InvalidInput
from fit14.models import GoalDraft, StoredChallenge, StoredPlan
from fit14.services.goal_catalog import GoalDimension, find_option
from fit14.services.goal_data import GoalDataAggregate
from fit14.services.storage import PlanStore
from fit14.services.workout_plan import Day, Exercise, WorkoutPlan

START = date(2026, 1, 5)


@pytest.fixture
def factory():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(factory):
    return PlanStore(factory)


def _plan(completed=0, title="Core Builder"):
    days = tuple(
        Day(n, START + timedelta(days=n - 1), (Exercise("Plank", 3, 30, is_completed=n <= completed),))
        for n in range(1, 15)
    )
    return WorkoutPlan(user_goals_text="Stronger core", summary=title, days=days).make_active()


# --- Current plan ---

def test_plan_round_trip(store):
    plan = _plan(completed=3)
    store.save_plan(plan)
    assert store.load_current_plan() == plan


def test_only_one_current_plan(store, factory):
    store.save_plan(_plan(title="First"))
    second = _plan(title="Second")
    store.save_plan(second)
    assert store.load_current_plan() == second
    with session_scope(factory) as s:
        assert s.query(StoredPlan).count() == 1


def test_saving_same_plan_updates_it(store):
    plan = _plan()
    store.save_plan(plan)
    day = plan.days[0]
    toggled = plan.with_exercise_toggled(day.id, day.exercises[0].id)
    store.save_plan(toggled)
    assert store.load_current_plan().days[0].is_completed


def test_clear_current_plan(store):
    store.save_plan(_plan())
    store.clear_current_plan()
    assert store.load_current_plan() is None


def test_stale_schema_version_is_discarded(store, factory):
    store.save_plan(_plan())
    with session_scope(factory) as s:
        s.execute(update(StoredPlan).values(schema_version=0))
    assert store.load_current_plan() is None
    with session_scope(factory) as s:
        assert s.query(StoredPlan).count() == 0


def test_unreadable_document_is_discarded(store, factory):
    store.save_plan(_plan())
    with session_scope(factory) as s:
        s.execute(update(StoredPlan).values(document={"garbage": True}))
    assert store.load_current_plan() is None


# --- Goal draft ---

def test_goal_data_round_trip(store):
    assert store.load_goal_data() is None
    agg = (
        GoalDataAggregate()
        .update_free_text("Core strength")
        .set_selection(GoalDimension.FITNESS_LEVEL, find_option(GoalDimension.FITNESS_LEVEL, "beginner"))
    )
    store.save_goal_data(agg)
    store.save_goal_data(agg.update_free_text("Core and balance"))
    loaded = store.load_goal_data()
    assert loaded.free_text == "Core and balance"
    assert loaded.selection_for(GoalDimension.FITNESS_LEVEL).effective_value() == "beginner"


def test_clear_goal_data(store, factory):
    store.save_goal_data(GoalDataAggregate().update_free_text("x"))
    store.clear_goal_data()
    with session_scope(factory) as s:
        assert s.query(GoalDraft).count() == 0


# --- Archive ---

def test_archive_current_plan(store):
    plan = _plan(completed=10)
    store.save_plan(plan)
    challenge = store.archive_current_plan(date(2026, 1, 19)).challenge

    assert challenge.original_plan_id == plan.id
    assert challenge.completed_days == 10
    assert store.load_current_plan() is None
    assert store.completion_count() == 1
    assert store.get_challenge(challenge.id) == challenge


def test_archive_without_plan_raises(store):
    with pytest.raises(InvalidInput):
        store.archive_current_plan()


def test_list_challenges_newest_first(store):
    for offset, title in [(0, "Oldest"), (30, "Newest"), (15, "Middle")]:
        store.save_plan(_plan(title=title))
        store.archive_current_plan(date(2026, 1, 19) + timedelta(days=offset))
    assert [c.challenge_title for c in store.list_challenges()] == ["Newest", "Middle", "Oldest"]


def test_delete_challenge(store):
    store.save_plan(_plan())
    challenge = store.archive_current_plan().challenge
    assert store.delete_challenge(challenge.id) is True
    assert store.delete_challenge(challenge.id) is False
    assert store.get_challenge(uuid4()) is None
    assert store.completion_count() == 0


def test_stale_challenge_skipped_in_listing(store, factory):
    store.save_plan(_plan(title="Keep"))
    store.archive_current_plan(date(2026, 1, 19))
    store.save_plan(_plan(title="Stale"))
    stale = store.archive_current_plan(date(2026, 2, 2)).challenge
    with session_scope(factory) as s:
        s.execute(update(StoredChallenge).where(StoredChallenge.id == str(stale.id)).values(schema_version=99))
    assert [c.challenge_title for c in store.list_challenges()] == ["Keep"]
    assert store.completion_count() == 1


def test_first_archive_reports_first_badge(store):
    store.save_plan(_plan(completed=14))
    result = store.archive_current_plan(date(2026, 1, 19))
    assert [b.id for b in result.new_badges] == ["first_steps"]

    for offset in (14, 28, 42):
        store.save_plan(_plan(completed=14))
        result = store.archive_current_plan(date(2026, 1, 19) + timedelta(days=offset))
    assert store.completion_count() == 4
    assert result.new_badges == ()


def test_goal_draft_that_is_not_an_object_is_discarded(store, factory):
    store.save_goal_data(GoalDataAggregate().update_free_text("x"))
    with session_scope(factory) as s:
        s.execute(update(GoalDraft).values(document=["not", "a", "draft"]))
    assert store.load_goal_data() is None
    with session_scope(factory) as s:
        assert s.query(GoalDraft).count() == 0


def test_goal_draft_with_null_free_text_loads_empty(store, factory):
    agg = GoalDataAggregate().update_free_text("x")
    document = agg.to_dict()
    document["freeText"] = None
    store.save_goal_data(agg)
    with session_scope(factory) as s:
        s.execute(update(GoalDraft).values(document=document))
    assert store.load_goal_data().free_text == ""
