# wallet/services/summary.py
"""
Pay period summary: the one place where leftover money is computed.

Plain words:
- gross income  = what the pay period declares (0 if never entered)
- + extra income (income transactions)
- + expenses    (expense/transfer transactions, as signed by the caller)
- - savings     (net savings entries)
- - reserved    (planned payments not paid yet)
= leftover
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

from wallet.errors import UnresolvableReference
from wallet.models import (
    Account,
    Category,
    CreateSavingEntryInput,
    PayPeriod,
    PayPeriodSummary,
    PlannedPayment,
    PlannedStatus,
    Record,
    SavingEntry,
    Transaction,
    TxnType,
    parse_record,
)
from wallet.services.lookups import default_savings_account, index_by_id, resolve

_OUT_TYPES = (TxnType.expense, TxnType.transfer)


def find_pay_period(pay_periods: Iterable[PayPeriod], pay_period_id: int) -> PayPeriod:
    for pp in pay_periods:
        if pp.id == pay_period_id:
            return pp
    raise UnresolvableReference("pay_period", pay_period_id)


def summarize_pay_period(
    pay_period: Optional[PayPeriod],
    transactions: Iterable[Transaction],
    saving_entries: Iterable[SavingEntry],
    reserved_planned_cents: int = 0,
    *,
    accounts: Optional[Iterable[Account]] = None,
    categories: Optional[Iterable[Category]] = None,
) -> PayPeriodSummary:
    """
    Build the summary for one pay period.

    Only records whose pay_period_id matches are counted, so callers may pass
    a wider list. When `accounts` / `categories` are given, every counted
    record must reference a known id, otherwise UnresolvableReference.
    Inputs are read only; calling twice gives the same result.
    """
    if pay_period is None:
        raise UnresolvableReference("pay_period", None)

    account_index = index_by_id(accounts) if accounts is not None else None
    category_index = index_by_id(categories) if categories is not None else None

    txns = [t for t in transactions if t.pay_period_id == pay_period.id]
    entries = [e for e in saving_entries if e.pay_period_id == pay_period.id]

    for t in txns:
        if account_index is not None:
            resolve(account_index, t.account_id, "account")
        if category_index is not None:
            resolve(category_index, t.category_id, "category")
    if account_index is not None:
        for e in entries:
            resolve(account_index, e.account_id, "account")

    gross = pay_period.gross_income_cents or 0
    # amounts are taken at face value: the sign was set when the row was written
    additional = sum(t.amount_cents for t in txns if t.type == TxnType.income)
    expenses = sum(t.amount_cents for t in txns if t.type in _OUT_TYPES)
    savings = sum(e.amount_cents for e in entries)
    reserved = int(reserved_planned_cents)

    return PayPeriodSummary(
        pay_period_id=pay_period.id,
        pay_date=pay_period.pay_date,
        gross_income_cents=gross,
        additional_income_cents=additional,
        expenses_out_cents=expenses,
        savings_out_cents=savings,
        reserved_planned_cents=reserved,
        leftover_cents=gross + additional + expenses - savings - reserved,
    )


def planned_reserve(
    planned_payments: Iterable[PlannedPayment],
    start: date,
    end: Optional[date] = None,
) -> int:
    """
    Cents held back for planned payments due in [start, end).
    Executed, canceled or already-linked payments reserve nothing.
    """
    total = 0
    for p in planned_payments:
        if p.status != PlannedStatus.planned or p.linked_txn_id is not None:
            continue
        if p.due_date < start or (end is not None and p.due_date >= end):
            continue
        total += abs(p.amount_cents)
    return total


class PeriodTotals(Record):
    periods: int
    gross_income_cents: int
    additional_income_cents: int
    expenses_cents: int  # absolute value, for display
    savings_cents: int
    leftover_cents: int


def summarize_totals(summaries: Sequence[PayPeriodSummary]) -> PeriodTotals:
    """Roll several period summaries up into dashboard totals."""
    return PeriodTotals(
        periods=len(summaries),
        gross_income_cents=sum(s.gross_income_cents for s in summaries),
        additional_income_cents=sum(s.additional_income_cents for s in summaries),
        expenses_cents=sum(abs(s.expenses_out_cents) for s in summaries),
        savings_cents=sum(s.savings_out_cents for s in summaries),
        leftover_cents=sum(s.leftover_cents for s in summaries),
    )


class SavingsTotals(Record):
    deposits_cents: int
    withdrawals_cents: int  # absolute value
    net_cents: int


def savings_totals(entries: Iterable[SavingEntry]) -> SavingsTotals:
    amounts: List[int] = [e.amount_cents for e in entries]
    deposits = sum(a for a in amounts if a > 0)
    withdrawals = sum(-a for a in amounts if a < 0)
    return SavingsTotals(
        deposits_cents=deposits,
        withdrawals_cents=withdrawals,
        net_cents=deposits - withdrawals,
    )


def leftover_saving_entry(
    summary: PayPeriodSummary,
    pay_period: PayPeriod,
    accounts: Iterable[Account],
    user_id: int,
) -> Optional[CreateSavingEntryInput]:
    """
    Draft a savings entry that puts a period's leftover aside.
    None when there is nothing left over.
    """
    if summary.pay_period_id != pay_period.id:
        raise ValueError("summary does not belong to this pay period")
    if summary.leftover_cents <= 0:
        return None
    account = default_savings_account(accounts)
    if account is None:
        raise UnresolvableReference("account", "savings")
    return parse_record(
        CreateSavingEntryInput,
        {
            "user_id": user_id,
            "pay_period_id": pay_period.id,
            "account_id": account.id,
            "amount_cents": summary.leftover_cents,
            "entry_date": pay_period.pay_date.isoformat(),
            "note": f"Savings from pay period {pay_period.pay_date.isoformat()}",
        },
    )
