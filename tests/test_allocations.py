# tests/test_allocations.py
from __future__ import annotations

import random

import pytest

from wallet.errors import (
    InsufficientUnassignedBalance,
    NotADeposit,
    UnresolvableReference,
    ValidationFailed,
)
from wallet.models import Allocation, EntryAllocations, SavingEntry, SavingGoal
from wallet.services.allocations import SavingsAllocationLedger
from wallet.services.goals import progress_percent


def _entry(id, amount):
    return SavingEntry(
        id=id, user_id=1, account_id=3, amount_cents=amount, entry_date="2026-01-28"
    )


def _goal(id, target=100000, name=None):
    return SavingGoal(
        id=id, user_id=1, name=name or f"Goal {id}", target_amount_cents=target
    )


def _ledger(allocations=()):
    entries = [_entry(1, 30000), _entry(2, 20000), _entry(3, 5000), _entry(4, -7000)]
    goals = [_goal(10, name="Visa"), _goal(11, name="Car")]
    return SavingsAllocationLedger(entries, goals, allocations)


def test_goal_saved_from_two_entries():
    led = _ledger()
    led.assign_entry_to_goal(1, 10, 30000)
    led.assign_entry_to_goal(2, 10, 20000)

    assert led.saved_cents(10) == 50000
    goal = next(g for g in led.annotate_goals() if g.id == 10)
    assert goal.saved_cents == 50000
    assert goal.remaining_cents == 50000
    assert goal.assigned_entry_ids == (1, 2)
    assert progress_percent(goal) == 50


def test_over_allocation_is_rejected_without_effect():
    led = _ledger()
    with pytest.raises(InsufficientUnassignedBalance) as info:
        led.assign_entry_to_goal(3, 10, 8000)
    assert info.value.requested_cents == 8000
    assert info.value.unassigned_cents == 5000

    ea = led.get_entry_allocations(3)
    assert ea.total_allocated_cents == 0
    assert ea.unassigned_cents == 5000
    assert ea.allocations == ()


def test_omitted_amount_takes_the_whole_remainder():
    led = _ledger()
    led.assign_entry_to_goal(1, 10, 12000)
    ea = led.assign_entry_to_goal(1, 11)

    assert ea.total_allocated_cents == 30000
    assert ea.unassigned_cents == 0
    assert [(a.goal_id, a.goal_name, a.amount_cents) for a in ea.allocations] == [
        (10, "Visa", 12000),
        (11, "Car", 18000),
    ]

    # nothing left: omitted amount now fails
    with pytest.raises(InsufficientUnassignedBalance):
        led.assign_entry_to_goal(1, 10)


def test_repeated_assign_increases_existing_allocation():
    led = _ledger()
    led.assign_entry_to_goal(2, 11, 5000)
    ea = led.assign_entry_to_goal(2, 11, 2500)
    assert len(ea.allocations) == 1
    assert ea.allocations[0].amount_cents == 7500


def test_withdrawals_are_not_allocable():
    led = _ledger()
    with pytest.raises(NotADeposit):
        led.assign_entry_to_goal(4, 10, 100)
    with pytest.raises(NotADeposit):
        led.assign_entry_to_goal(4, 10)
    assert [e.id for e in led.deposit_entries()] == [1, 2, 3]


@pytest.mark.parametrize("amount", [0, -5, 10.5, True])
def test_amount_must_be_positive_whole_cents(amount):
    led = _ledger()
    with pytest.raises(ValidationFailed) as info:
        led.assign_entry_to_goal(1, 10, amount)
    assert info.value.for_field("amount_cents")
    assert led.allocated_cents(1) == 0


def test_unknown_ids_are_unresolvable():
    led = _ledger()
    with pytest.raises(UnresolvableReference):
        led.assign_entry_to_goal(99, 10, 1)
    with pytest.raises(UnresolvableReference):
        led.assign_entry_to_goal(1, 99, 1)
    with pytest.raises(UnresolvableReference):
        led.get_entry_allocations(99)


def test_unassign_returns_freed_amount():
    led = _ledger()
    led.assign_entry_to_goal(1, 10, 10000)
    led.assign_entry_to_goal(1, 11, 5000)

    assert led.unassign_entry_from_goal(1, 10) == 10000
    ea = led.get_entry_allocations(1)
    assert [a.goal_id for a in ea.allocations] == [11]
    assert ea.unassigned_cents == 25000


def test_unassign_never_assigned_is_a_noop():
    led = _ledger()
    led.assign_entry_to_goal(2, 10, 20000)
    before = led.allocations()

    assert led.unassign_entry_from_goal(1, 10) == 0
    assert led.unassign_entry_from_goal(2, 11) == 0
    assert led.allocations() == before


def test_initial_allocations_are_checked():
    led = _ledger([Allocation(saving_entry_id=1, goal_id=10, amount_cents=30000)])
    assert led.unassigned_cents(1) == 0

    with pytest.raises(InsufficientUnassignedBalance):
        _ledger(
            [
                Allocation(saving_entry_id=3, goal_id=10, amount_cents=3000),
                Allocation(saving_entry_id=3, goal_id=11, amount_cents=3000),
            ]
        )
    with pytest.raises(NotADeposit):
        _ledger([Allocation(saving_entry_id=4, goal_id=10, amount_cents=1)])
    with pytest.raises(UnresolvableReference):
        _ledger([Allocation(saving_entry_id=1, goal_id=12, amount_cents=1)])


def test_allocation_sum_never_exceeds_entry_amount():
    led = _ledger()
    rng = random.Random(20260128)
    deposits = {1: 30000, 2: 20000, 3: 5000}

    for _ in range(500):
        entry_id = rng.choice([1, 2, 3])
        goal_id = rng.choice([10, 11])
        if rng.random() < 0.3:
            led.unassign_entry_from_goal(entry_id, goal_id)
        else:
            amount = rng.choice([None, 1, 500, 2500, 7000, 31000])
            try:
                led.assign_entry_to_goal(entry_id, goal_id, amount)
            except InsufficientUnassignedBalance:
                pass
        for eid, total in deposits.items():
            ea = led.get_entry_allocations(eid)
            assert 0 <= ea.total_allocated_cents <= total
            assert ea.unassigned_cents == total - ea.total_allocated_cents


def test_sync_entry_replaces_local_state():
    led = _ledger()
    led.assign_entry_to_goal(1, 10, 1000)

    server = EntryAllocations(
        entry_id=1,
        entry_amount_cents=30000,
        total_allocated_cents=25000,
        unassigned_cents=5000,
        allocations=[
            {"goal_id": 11, "goal_name": "Car", "amount_cents": 25000},
        ],
    )
    led.sync_entry(server)
    assert led.get_entry_allocations(1) == server
    assert led.saved_cents(10) == 0


def test_sync_entry_picks_up_edited_amount_and_rejects_incoherent_data():
    led = _ledger()
    led.sync_entry(
        EntryAllocations(
            entry_id=3, entry_amount_cents=9000, total_allocated_cents=0,
            unassigned_cents=9000,
        )
    )
    assert led.unassigned_cents(3) == 9000

    with pytest.raises(InsufficientUnassignedBalance):
        led.sync_entry(
            EntryAllocations(
                entry_id=3, entry_amount_cents=9000, total_allocated_cents=9500,
                unassigned_cents=-500,
                allocations=[{"goal_id": 10, "goal_name": "Visa", "amount_cents": 9500}],
            )
        )
    assert led.unassigned_cents(3) == 9000
