# wallet/api/savings.py
"""
Savings entries, goals, and the allocations between them.

Allocation writes never trust local math: after the backend answers
(accepted or rejected) the entry's breakdown is fetched again and returned.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Union

from wallet.api.base import DateParam, Resource, date_param, payload
from wallet.client import ApiClient
from wallet.errors import AllocationRejected, ApiError
from wallet.models import (
    AssignAmountInput,
    Created,
    CreatedSavingEntry,
    CreateSavingEntryInput,
    CreateSavingGoalInput,
    Deleted,
    EntryAllocations,
    Linked,
    SavingEntry,
    SavingGoal,
    Unlinked,
    parse_record,
    parse_records,
)
from wallet.services.goals import DEFAULT_PERIOD_DAYS, GoalPlan, plan_goals

logger = logging.getLogger("wallet.savings")

# statuses the backend uses to refuse an allocation (over-allocation, withdrawal, ...)
_REJECTED = (400, 409, 422)


class SavingsApi(Resource):
    def list_entries(
        self,
        user_id: int,
        *,
        pay_period_id: Optional[int] = None,
        date_from: DateParam = None,
        date_to: DateParam = None,
    ) -> List[SavingEntry]:
        params = {
            "pay_period_id": pay_period_id or None,
            "from": date_param(date_from),
            "to": date_param(date_to),
        }
        data = self.client.get(f"/savings/entries/user/{user_id}", params=params)
        return parse_records(SavingEntry, data)

    def create_entry(
        self, data: Union[CreateSavingEntryInput, Mapping[str, Any]]
    ) -> CreatedSavingEntry:
        """Deposit (> 0) or withdrawal (< 0); optionally allocated to a goal in one go."""
        body = payload(CreateSavingEntryInput, data)
        return parse_record(CreatedSavingEntry, self.client.post("/savings/entries", body))

    def delete_entry(self, entry_id: int) -> Deleted:
        """Delete an entry; whatever it had allocated to goals is released."""
        return parse_record(Deleted, self.client.delete(f"/savings/entries/{entry_id}"))


class GoalsApi(Resource):
    def __init__(self, client: ApiClient, period_days: int = DEFAULT_PERIOD_DAYS):
        super().__init__(client)
        self.period_days = period_days

    def list_by_user(self, user_id: int) -> List[SavingGoal]:
        """Goals pre-annotated with saved_cents / remaining_cents."""
        return parse_records(SavingGoal, self.client.get(f"/savings/goals/user/{user_id}"))

    def create(self, data: Union[CreateSavingGoalInput, Mapping[str, Any]]) -> Created:
        body = payload(CreateSavingGoalInput, data)
        return parse_record(Created, self.client.post("/savings/goals", body))

    def delete(self, goal_id: int) -> Deleted:
        return parse_record(Deleted, self.client.delete(f"/savings/goals/{goal_id}"))

    def plans(self, user_id: int, today: date) -> List[GoalPlan]:
        """Fetch goals and compute progress + suggested contribution for each."""
        return plan_goals(self.list_by_user(user_id), today, self.period_days)

    # ---------- allocations ----------

    def get_entry_allocations(self, entry_id: int) -> EntryAllocations:
        data = self.client.get(f"/savings/goals/entries/{entry_id}/allocations")
        return parse_record(EntryAllocations, data)

    def assign_entry_to_goal(
        self, entry_id: int, goal_id: int, amount_cents: Optional[int] = None
    ) -> EntryAllocations:
        """
        Allocate part (or, with no amount, all the unassigned rest) of an entry.
        Returns the re-fetched breakdown. A refusal raises AllocationRejected
        carrying the fresh breakdown as well.
        """
        body = None
        if amount_cents is not None:
            body = payload(AssignAmountInput, {"amount_cents": amount_cents})
        path = f"/savings/goals/entries/{entry_id}/assign-goal/{goal_id}"
        try:
            parse_record(Linked, self.client.post(path, body))
        except ApiError as ex:
            if ex.status not in _REJECTED:
                raise
            logger.info(
                "allocation rejected entry=%s goal=%s status=%s", entry_id, goal_id, ex.status
            )
            raise AllocationRejected(
                str(ex), ex.status, self.get_entry_allocations(entry_id)
            ) from ex
        return self.get_entry_allocations(entry_id)

    def unassign_entry_from_goal(self, entry_id: int, goal_id: int) -> int:
        """Remove the allocation; returns the freed cents (0 if nothing was allocated)."""
        path = f"/savings/goals/entries/{entry_id}/assign-goal/{goal_id}"
        return parse_record(Unlinked, self.client.delete(path)).amount_cents_freed
