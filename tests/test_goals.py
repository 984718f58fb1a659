# tests/test_goals.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from wallet.models import SavingGoal
from wallet.services.goals import (
    DEFAULT_PERIOD_DAYS,
    is_completed,
    plan_goal,
    plan_goals,
    progress_percent,
    remaining_cents,
    suggested_contribution,
)

TODAY = date(2026, 1, 29)


def _goal(target=600000, saved=0, remaining=None, target_date="2026-07-30"):
    return SavingGoal(
        id=1,
        user_id=1,
        name="Visa renewal",
        target_amount_cents=target,
        target_date=target_date,
        saved_cents=saved,
        remaining_cents=remaining,
    )


def test_progress_is_clamped_between_0_and_100():
    assert progress_percent(_goal(target=100000, saved=50000)) == 50
    assert progress_percent(_goal(target=100000, saved=250000)) == 100
    assert progress_percent(_goal(target=100000, saved=-10)) == 0
    assert progress_percent(_goal(target=3, saved=1)) == pytest.approx(33.333, rel=1e-3)


def test_zero_target_means_zero_progress():
    assert progress_percent(_goal(target=0, saved=500)) == 0
    assert not is_completed(_goal(target=0, saved=500))


def test_completed_at_or_over_target():
    assert is_completed(_goal(target=100, saved=100))
    assert is_completed(_goal(target=100, saved=101))
    assert not is_completed(_goal(target=100, saved=99))


def test_remaining_prefers_annotated_value():
    assert remaining_cents(_goal(saved=20000, remaining=580000)) == 580000
    assert remaining_cents(_goal(saved=20000)) == 580000
    assert remaining_cents(_goal(target=100, saved=300)) == 0
    assert remaining_cents(_goal(remaining=-5)) == -5


def test_no_suggestion_cases():
    assert suggested_contribution(_goal(target_date=None), TODAY) is None
    assert suggested_contribution(_goal(target=100, saved=100), TODAY) is None
    assert suggested_contribution(_goal(remaining=0), TODAY) is None
    assert suggested_contribution(_goal(target_date="2026-01-29"), TODAY) is None
    assert suggested_contribution(_goal(target_date="2025-12-01"), TODAY) is None


def test_suggestion_spreads_remaining_over_periods():
    # 182 days -> ceil(182 / 15) = 13 periods
    goal = _goal(saved=20000, remaining=580000)
    assert (date(2026, 7, 30) - TODAY).days == 182
    assert suggested_contribution(goal, TODAY) == pytest.approx(580000 / 13)


def test_suggestion_is_not_rounded():
    goal = _goal(target=1000, target_date="2026-02-28")  # 30 days -> 2 periods
    assert suggested_contribution(goal, TODAY) == 500.0
    odd = _goal(target=1001, target_date="2026-02-28")
    assert suggested_contribution(odd, TODAY) == 500.5


def test_one_day_left_is_one_period():
    goal = _goal(target=7000, target_date="2026-01-30")
    assert suggested_contribution(goal, TODAY) == 7000


def test_period_length_is_a_parameter():
    goal = _goal(target=28000, target_date="2026-02-26")  # 28 days
    assert DEFAULT_PERIOD_DAYS == 15
    assert suggested_contribution(goal, TODAY) == 14000  # 2 fortnights
    assert suggested_contribution(goal, TODAY, period_days=7) == 7000  # 4 weeks
    assert suggested_contribution(goal, TODAY, period_days=30) == 28000  # 1 month


@pytest.mark.parametrize("bad", [0, -15, 1.5, True])
def test_period_length_must_be_positive(bad):
    with pytest.raises(ValueError):
        suggested_contribution(_goal(), TODAY, period_days=bad)


def test_datetime_today_counts_partial_days():
    goal = _goal(target=3000, target_date="2026-01-31")
    noon = datetime(2026, 1, 29, 12, 0)
    # 1.5 days left -> ceil = 2 days -> 1 period
    assert suggested_contribution(goal, noon) == 3000

    aware = datetime(2026, 1, 30, 23, 0, tzinfo=timezone.utc)
    assert suggested_contribution(goal, aware) == 3000
    late = datetime(2026, 1, 31, 0, 0) + timedelta(minutes=1)
    assert suggested_contribution(goal, late) is None


def test_planner_does_not_mutate_goal():
    goal = _goal(saved=20000)
    before = goal.model_dump()
    suggested_contribution(goal, TODAY)
    progress_percent(goal)
    assert goal.model_dump() == before


def test_plan_goal_bundles_everything():
    plan = plan_goal(_goal(target=100000, saved=50000, remaining=50000), TODAY)
    assert plan.goal_id == 1
    assert plan.percent == 50
    assert plan.remaining_cents == 50000
    assert plan.completed is False
    assert plan.suggested_cents == pytest.approx(50000 / 13)

    plans = plan_goals([_goal(target_date=None)], TODAY, period_days=7)
    assert plans[0].suggested_cents is None


def test_goal_plan_is_an_immutable_record():
    plan = plan_goal(_goal(target=1000, saved=250), TODAY)
    assert plan.model_dump()["percent"] == 25
    with pytest.raises(Exception):
        plan.percent = 0
