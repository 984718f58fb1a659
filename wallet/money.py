# wallet/money.py
"""
Helpers for working with money amounts.

Definitions
- cents: integer number of minor units, e.g. 2550 for 25.50
- decimal text: human input like "25.50" (what a form field holds)

Public API:
- to_cents("25.50") -> 2550             # round(value * 100), half away from zero
- from_cents(2550) -> "25.50"
- format_currency(2550, "AUD") -> "$25.50"   # display only
- signed_amount("expense", 3000) -> -3000   # sign by transaction type
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from wallet.config import get_settings

__all__ = [
    "to_cents",
    "from_cents",
    "format_currency",
    "signed_amount",
    "NEGATIVE_TYPES",
]

Number = Union[str, int, float, Decimal]

# Transaction types that take money out (stored with a negative sign)
NEGATIVE_TYPES = frozenset({"expense", "transfer"})

_CURRENCY_SYMBOLS = {
    "AUD": "$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
    "MXN": "MX$",
}


# ---------- Conversions ----------


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("amount must be a number")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() gives the shortest text that round-trips, so 25.5 -> "25.5"
        return Decimal(repr(value))
    if isinstance(value, str):
        s = value.strip()
        if not s:
            raise ValueError("amount is required")
        try:
            d = Decimal(s)
        except InvalidOperation:
            raise ValueError(f"invalid amount: {value!r}") from None
        if not d.is_finite():
            raise ValueError(f"invalid amount: {value!r}")
        return d
    raise ValueError(f"unsupported amount type: {type(value).__name__}")


def to_cents(value: Number) -> int:
    """Convert a decimal currency amount to integer cents. '25.50' -> 2550."""
    d = _as_decimal(value)
    return int((d * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> str:
    """Convert integer cents to decimal text with two places. 2550 -> '25.50'."""
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise ValueError("cents must be an integer")
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), 100)
    return f"{sign}{units}.{rest:02d}"


def format_currency(cents: Optional[int], currency: Optional[str] = None) -> str:
    """
    Display helper, e.g. 123450 -> '$1,234.50'.
    None means the amount was never recorded.
    Without a currency, Settings.default_currency is used.
    """
    if cents is None:
        return "Not recorded"
    code = (currency or get_settings().default_currency).upper()
    symbol = _CURRENCY_SYMBOLS.get(code, f"{code} ")
    units, rest = divmod(abs(cents), 100)
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{units:,}.{rest:02d}"


# ---------- Sign discipline ----------


def signed_amount(txn_type: str, cents: int) -> int:
    """
    Apply the sign convention for a transaction type.
    - expense / transfer: always <= 0
    - income: always >= 0
    - adjustment: kept as given (can go either way)
    """
    kind = str(getattr(txn_type, "value", txn_type)).lower()
    if kind in NEGATIVE_TYPES:
        return -abs(cents)
    if kind == "income":
        return abs(cents)
    if kind == "adjustment":
        return cents
    raise ValueError(f"unknown transaction type: {txn_type!r}")
