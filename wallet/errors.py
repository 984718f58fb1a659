# wallet/errors.py
"""
Error taxonomy shared by the calculators and the API client.

Plain words:
- ValidationFailed: bad input, reported per field (shown inline next to the field).
- UnresolvableReference: a record we need is missing -> show as a load failure.
- InvariantViolation: an allocation that would break the ledger rules.
- ApiError / Unauthorized / NetworkError: problems talking to the backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str  # dotted path, e.g. "type" or "allocations.0.amount_cents"
    message: str  # short, human-readable


class WalletError(Exception):
    """Base class for every error the wallet core raises on purpose."""

    user_message = "Something went wrong."


class ValidationFailed(WalletError):
    user_message = "Please check the highlighted fields."

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: List[FieldError] = list(errors)
        super().__init__(
            "; ".join(f"{e.field}: {e.message}" for e in self.errors)
            or "validation failed"
        )

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls([FieldError(field, message)])

    def for_field(self, field: str) -> Optional[str]:
        """First message attached to `field`, if any."""
        for e in self.errors:
            if e.field == field:
                return e.message
        return None


class UnresolvableReference(WalletError):
    user_message = "Some data could not be loaded. Please try again."

    def __init__(self, kind: str, ref_id: Any):
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(f"{kind} {ref_id} could not be resolved")


class InvariantViolation(WalletError):
    user_message = "That change is not allowed."


class InsufficientUnassignedBalance(InvariantViolation):
    user_message = "Not enough unassigned balance in this savings entry."

    def __init__(self, entry_id: int, requested_cents: int, unassigned_cents: int):
        self.entry_id = entry_id
        self.requested_cents = requested_cents
        self.unassigned_cents = unassigned_cents
        super().__init__(
            f"entry {entry_id}: requested {requested_cents} cents "
            f"but only {unassigned_cents} unassigned"
        )


class NotADeposit(InvariantViolation):
    user_message = "Only deposits can be assigned to a goal."

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"entry {entry_id} is not a deposit")


class ApiError(WalletError):
    user_message = "The server could not complete the request."

    def __init__(self, message: str, status: int, data: Any = None):
        self.status = status
        self.data = data
        super().__init__(message)


class Unauthorized(ApiError):
    user_message = "Your session has expired. Please sign in again."


class NetworkError(ApiError):
    user_message = "Could not reach the server. Check your connection and retry."

    def __init__(self, message: str = "Network error"):
        super().__init__(message, 0)


class AllocationRejected(InvariantViolation):
    """
    The backend refused an allocation write.
    `allocations` holds the entry breakdown re-fetched right after the refusal.
    """

    user_message = "The allocation was rejected. Balances have been refreshed."

    def __init__(self, message: str, status: int, allocations: Any = None):
        self.status = status
        self.allocations = allocations
        super().__init__(message)


def user_message(exc: BaseException, action: Optional[str] = None) -> str:
    """
    Short text for end users. Known errors use their own message;
    anything else gets a generic one (never the raw exception text).
    """
    if isinstance(exc, ValidationFailed) and exc.errors:
        text = exc.errors[0].message
    elif isinstance(exc, WalletError):
        text = exc.user_message
    else:
        text = WalletError.user_message
    return f"Could not {action}: {text}" if action else text


__all__ = [
    "FieldError",
    "WalletError",
    "ValidationFailed",
    "UnresolvableReference",
    "InvariantViolation",
    "InsufficientUnassignedBalance",
    "NotADeposit",
    "AllocationRejected",
    "ApiError",
    "Unauthorized",
    "NetworkError",
    "user_message",
]
