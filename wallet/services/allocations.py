# wallet/services/allocations.py
"""
Savings allocation ledger: how each deposit is split across goals.

Rules:
- Only deposits (amount_cents > 0) can be allocated.
- For every entry: sum(allocations) <= entry.amount_cents. Always.
- A write either fully applies or raises; nothing is half-done.
- A goal's saved amount is the sum of allocations pointing at it.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from wallet.errors import (
    InsufficientUnassignedBalance,
    NotADeposit,
    UnresolvableReference,
    ValidationFailed,
)
from wallet.models import (
    Allocation,
    EntryAllocations,
    GoalAllocation,
    SavingEntry,
    SavingGoal,
)
from wallet.services.lookups import index_by_id

logger = logging.getLogger("wallet.allocations")


class SavingsAllocationLedger:
    """
    In-memory view of entries, goals and their allocations.

    Built from already-fetched data. After every write that went through the
    backend, call `sync_entry` with the server's breakdown instead of trusting
    the local arithmetic.
    """

    def __init__(
        self,
        entries: Iterable[SavingEntry],
        goals: Iterable[SavingGoal],
        allocations: Iterable[Allocation] = (),
    ):
        self._entries: Dict[int, SavingEntry] = index_by_id(entries)
        self._goals: Dict[int, SavingGoal] = index_by_id(goals)
        # entry_id -> {goal_id: cents}
        self._alloc: Dict[int, Dict[int, int]] = {}

        staged: Dict[int, Dict[int, int]] = {}
        for a in allocations:
            self._entry(a.saving_entry_id)
            self._goal(a.goal_id)
            per_goal = staged.setdefault(a.saving_entry_id, {})
            per_goal[a.goal_id] = per_goal.get(a.goal_id, 0) + a.amount_cents
        for entry_id, per_goal in staged.items():
            self._check_split(self._entries[entry_id], per_goal)
        self._alloc = staged

    # ---------- lookups ----------

    def _entry(self, entry_id: int) -> SavingEntry:
        try:
            return self._entries[entry_id]
        except KeyError:
            raise UnresolvableReference("saving_entry", entry_id) from None

    def _goal(self, goal_id: int) -> SavingGoal:
        try:
            return self._goals[goal_id]
        except KeyError:
            raise UnresolvableReference("saving_goal", goal_id) from None

    @staticmethod
    def _check_split(entry: SavingEntry, per_goal: Dict[int, int]) -> None:
        total = sum(per_goal.values())
        if total and not entry.is_deposit:
            raise NotADeposit(entry.id)
        if total > entry.amount_cents:
            # requested = whole split, available = whole entry
            raise InsufficientUnassignedBalance(entry.id, total, entry.amount_cents)

    def allocated_cents(self, entry_id: int) -> int:
        self._entry(entry_id)
        return sum(self._alloc.get(entry_id, {}).values())

    def unassigned_cents(self, entry_id: int) -> int:
        return self._entry(entry_id).amount_cents - self.allocated_cents(entry_id)

    def deposit_entries(self) -> List[SavingEntry]:
        """Entries eligible for allocation, in id order."""
        return [e for _, e in sorted(self._entries.items()) if e.is_deposit]

    def allocations(self) -> List[Allocation]:
        return [
            Allocation(saving_entry_id=eid, goal_id=gid, amount_cents=cents)
            for eid, per_goal in sorted(self._alloc.items())
            for gid, cents in sorted(per_goal.items())
        ]

    # ---------- queries ----------

    def get_entry_allocations(self, entry_id: int) -> EntryAllocations:
        entry = self._entry(entry_id)
        per_goal = self._alloc.get(entry_id, {})
        total = sum(per_goal.values())
        return EntryAllocations(
            entry_id=entry.id,
            entry_amount_cents=entry.amount_cents,
            total_allocated_cents=total,
            unassigned_cents=entry.amount_cents - total,
            allocations=tuple(
                GoalAllocation(
                    goal_id=gid, goal_name=self._goals[gid].name, amount_cents=cents
                )
                for gid, cents in sorted(per_goal.items())
            ),
        )

    def saved_cents(self, goal_id: int) -> int:
        self._goal(goal_id)
        return sum(per_goal.get(goal_id, 0) for per_goal in self._alloc.values())

    def annotate_goals(self) -> List[SavingGoal]:
        """Goals with saved/remaining/assigned_entry_ids filled from the ledger."""
        out = []
        for gid, goal in sorted(self._goals.items()):
            saved = self.saved_cents(gid)
            entry_ids = tuple(
                sorted(eid for eid, per_goal in self._alloc.items() if gid in per_goal)
            )
            out.append(
                goal.model_copy(
                    update={
                        "saved_cents": saved,
                        "remaining_cents": max(goal.target_amount_cents - saved, 0),
                        "assigned_entry_ids": entry_ids,
                    }
                )
            )
        return out

    # ---------- writes ----------

    def assign_entry_to_goal(
        self, entry_id: int, goal_id: int, amount_cents: Optional[int] = None
    ) -> EntryAllocations:
        """
        Create or increase the allocation of `entry_id` to `goal_id`.
        With no amount, the whole unassigned remainder goes to the goal.
        """
        entry = self._entry(entry_id)
        self._goal(goal_id)
        if not entry.is_deposit:
            raise NotADeposit(entry_id)

        unassigned = self.unassigned_cents(entry_id)
        if amount_cents is None:
            amount = unassigned
            if amount <= 0:
                raise InsufficientUnassignedBalance(entry_id, 0, unassigned)
        else:
            if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
                raise ValidationFailed.single(
                    "amount_cents", "Amount must be a whole number of cents"
                )
            if amount_cents <= 0:
                raise ValidationFailed.single(
                    "amount_cents", "Amount must be greater than 0"
                )
            amount = amount_cents
            if amount > unassigned:
                logger.debug(
                    "reject assign entry=%s goal=%s amount=%s unassigned=%s",
                    entry_id,
                    goal_id,
                    amount,
                    unassigned,
                )
                raise InsufficientUnassignedBalance(entry_id, amount, unassigned)

        per_goal = self._alloc.setdefault(entry_id, {})
        per_goal[goal_id] = per_goal.get(goal_id, 0) + amount
        logger.debug("assigned entry=%s goal=%s amount=%s", entry_id, goal_id, amount)
        return self.get_entry_allocations(entry_id)

    def unassign_entry_from_goal(self, entry_id: int, goal_id: int) -> int:
        """Drop the allocation entirely; return the freed cents (0 if there was none)."""
        self._entry(entry_id)
        self._goal(goal_id)
        per_goal = self._alloc.get(entry_id)
        if not per_goal or goal_id not in per_goal:
            return 0
        freed = per_goal.pop(goal_id)
        if not per_goal:
            del self._alloc[entry_id]
        logger.debug("unassigned entry=%s goal=%s freed=%s", entry_id, goal_id, freed)
        return freed

    def sync_entry(self, entry_allocations: EntryAllocations) -> None:
        """
        Replace one entry's allocations with the backend's breakdown.
        The entry amount is refreshed too, in case it was edited elsewhere.
        """
        entry = self._entry(entry_allocations.entry_id)
        if entry.amount_cents != entry_allocations.entry_amount_cents:
            entry = entry.model_copy(
                update={"amount_cents": entry_allocations.entry_amount_cents}
            )
        per_goal: Dict[int, int] = {}
        for a in entry_allocations.allocations:
            self._goal(a.goal_id)
            if a.amount_cents > 0:
                per_goal[a.goal_id] = per_goal.get(a.goal_id, 0) + a.amount_cents
        self._check_split(entry, per_goal)

        self._entries[entry.id] = entry
        if per_goal:
            self._alloc[entry.id] = per_goal
        else:
            self._alloc.pop(entry.id, None)
