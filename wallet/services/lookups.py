# wallet/services/lookups.py
"""
Reference lookups shared by the calculators and pickers.

Why:
- The summary must fail loudly when an account/category id is unknown.
- Pickers only offer active accounts and categories matching the txn type.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from wallet.errors import UnresolvableReference
from wallet.models import Account, AccountType, Category, TxnType

T = TypeVar("T")


def index_by_id(records: Iterable[T]) -> Dict[int, T]:
    """Map id -> record. Later duplicates win (the API never sends them)."""
    return {r.id: r for r in records}  # type: ignore[attr-defined]


def resolve(index: Mapping[int, T], ref_id: Optional[int], kind: str) -> Optional[T]:
    """
    Look up `ref_id` in `index`.
    - None id -> None (nullable association)
    - unknown id -> UnresolvableReference
    """
    if ref_id is None:
        return None
    try:
        return index[ref_id]
    except KeyError:
        raise UnresolvableReference(kind, ref_id) from None


def active_accounts(accounts: Iterable[Account]) -> List[Account]:
    """Accounts that may be picked for new entries (inactive ones stay valid historically)."""
    return [a for a in accounts if a.is_active]


def default_savings_account(accounts: Iterable[Account]) -> Optional[Account]:
    """First active savings account, else the first active account."""
    pool = active_accounts(accounts)
    for a in pool:
        if a.type == AccountType.savings:
            return a
    return pool[0] if pool else None


def categories_for(
    txn_type: Union[TxnType, str], categories: Iterable[Category]
) -> List[Category]:
    """Categories whose kind matches the transaction type (UI filter, not a hard rule)."""
    kind = TxnType(txn_type).value
    return [c for c in categories if c.kind.value == kind]
