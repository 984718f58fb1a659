# wallet/services/goals.py
"""
Goal progress and the suggested per-period contribution.

The suggestion assumes pay periods of `period_days` days (15 by default,
i.e. twice a month). Users paid weekly or monthly should pass their own
value (see Settings.pay_period_days); irregular spacing is not modelled.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Union

from wallet.models import Record, SavingGoal

DEFAULT_PERIOD_DAYS = 15

Today = Union[date, datetime]


def remaining_cents(goal: SavingGoal) -> int:
    """Remaining amount as annotated by the backend, else target - saved (>= 0)."""
    if goal.remaining_cents is not None:
        return goal.remaining_cents
    return max(goal.target_amount_cents - goal.saved_cents, 0)


def progress_percent(goal: SavingGoal) -> float:
    """Saved / target as a percentage, clamped to [0, 100]; 0 when target is 0."""
    if goal.target_amount_cents <= 0:
        return 0.0
    pct = goal.saved_cents / goal.target_amount_cents * 100
    return min(100.0, max(0.0, pct))


def is_completed(goal: SavingGoal) -> bool:
    return progress_percent(goal) >= 100


def _days_until(target: date, today: Today) -> int:
    if isinstance(today, datetime):
        # deadline counts from midnight of the target day
        deadline = datetime.combine(target, time.min, tzinfo=today.tzinfo)
        return math.ceil((deadline - today).total_seconds() / 86400)
    return (target - today).days


def suggested_contribution(
    goal: SavingGoal,
    today: Today,
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> Optional[float]:
    """
    Cents to put aside each pay period to hit the target on time.

    None means "no suggestion": no target date, nothing left to save,
    or the deadline is today / already passed. The value is not rounded.
    """
    if isinstance(period_days, bool) or not isinstance(period_days, int) or period_days <= 0:
        raise ValueError("period_days must be a positive integer")
    if goal.target_date is None:
        return None
    remaining = remaining_cents(goal)
    if remaining <= 0:
        return None

    days_remaining = _days_until(goal.target_date, today)
    if days_remaining <= 0:
        return None
    periods_remaining = math.ceil(days_remaining / period_days)
    if periods_remaining <= 0:
        return None
    return remaining / periods_remaining


class GoalPlan(Record):
    goal_id: int
    saved_cents: int
    remaining_cents: int
    percent: float
    completed: bool
    suggested_cents: Optional[float]  # per period; None = no suggestion


def plan_goal(
    goal: SavingGoal, today: Today, period_days: int = DEFAULT_PERIOD_DAYS
) -> GoalPlan:
    return GoalPlan(
        goal_id=goal.id,
        saved_cents=goal.saved_cents,
        remaining_cents=remaining_cents(goal),
        percent=progress_percent(goal),
        completed=is_completed(goal),
        suggested_cents=suggested_contribution(goal, today, period_days),
    )


def plan_goals(
    goals: Iterable[SavingGoal], today: Today, period_days: int = DEFAULT_PERIOD_DAYS
) -> List[GoalPlan]:
    return [plan_goal(g, today, period_days) for g in goals]
