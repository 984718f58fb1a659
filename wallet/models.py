# wallet/models.py
"""
Record shapes for everything the wallet exchanges with the backend.

The same models parse API responses AND validate outbound form input,
so nothing downstream ever sees malformed data.
Money is always integer cents; dates are plain calendar dates.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum  # small enums for clarity
from typing import Annotated, Any, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PositiveInt,
    ValidationError,
    model_validator,
)

from wallet.config import get_settings
from wallet.errors import FieldError, ValidationFailed
from wallet.money import signed_amount, to_cents

M = TypeVar("M", bound=BaseModel)


# ---------- Enumerations (closed sets) ----------


class AccountType(str, Enum):
    cash = "cash"
    bank = "bank"
    credit = "credit"
    savings = "savings"


class TxnType(str, Enum):
    income = "income"  # conventionally >= 0
    expense = "expense"  # conventionally <= 0
    transfer = "transfer"  # conventionally <= 0
    adjustment = "adjustment"  # either sign


class CategoryKind(str, Enum):
    income = "income"
    expense = "expense"
    transfer = "transfer"
    adjustment = "adjustment"


class PlannedStatus(str, Enum):
    planned = "planned"
    executed = "executed"
    canceled = "canceled"


# ---------- Field types ----------

_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")
_STRICT_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _calendar_date(value: Any) -> Any:
    """Accept date, datetime or 'YYYY-MM-DD[Thh:mm...]'; keep only the date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        m = _DATE_RE.match(value.strip())
        if m:
            try:
                return date.fromisoformat(m.group(1))
            except ValueError:
                pass
    raise ValueError("Invalid date format (YYYY-MM-DD)")


def _input_date(value: Any) -> Any:
    # Form input: exactly YYYY-MM-DD (a date object is fine too)
    if isinstance(value, str) and not _STRICT_DATE_RE.match(value.strip()):
        raise ValueError("Invalid date format (YYYY-MM-DD)")
    return _calendar_date(value)


def _strict_bool(value: Any) -> Any:
    # MySQL tinyint(1) arrives as 0/1; nothing else is accepted
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError("must be true/false or 0/1")


def _name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Name must be at least 2 characters")
    return value


def _email(value: str) -> str:
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email")
    return value.lower()


def _currency(value: str) -> str:
    value = value.strip().upper()
    if len(value) != 3 or not value.isalpha():
        raise ValueError("Currency must be 3 letters")
    return value


def _entry_ids(value: Any) -> Any:
    # The goals query returns "1,2,3" (or null)
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(int(p) for p in value.split(",") if p.strip())
    return value


CalendarDate = Annotated[date, BeforeValidator(_calendar_date)]
InputDate = Annotated[date, BeforeValidator(_input_date)]
FlagBool = Annotated[bool, BeforeValidator(_strict_bool)]
Name = Annotated[str, AfterValidator(_name)]
Email = Annotated[str, AfterValidator(_email)]
Currency = Annotated[str, AfterValidator(_currency)]


def _default_currency() -> str:
    return get_settings().default_currency.upper()


class Record(BaseModel):
    """Inbound record: unknown keys are ignored, instances are immutable."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Input(BaseModel):
    """Outbound payload validated before it leaves the client."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")


# ---------- Users & auth ----------


class User(Record):
    id: PositiveInt
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[str] = None


class AuthUser(Record):
    id: PositiveInt
    name: str
    email: str
    role: str
    created_at: Optional[str] = None


class AuthResponse(Record):
    message: str
    token: str
    user: AuthUser


class CreateUserInput(Input):
    name: Name
    email: Optional[Email] = None


class RegisterInput(Input):
    name: Name
    email: Email
    password: str = Field(min_length=6)


class LoginInput(Input):
    email: Email
    password: str = Field(min_length=1)


class ChangePasswordInput(Input):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


# ---------- Accounts & categories ----------


class Account(Record):
    id: PositiveInt
    user_id: PositiveInt
    name: str
    type: AccountType
    currency: Currency = Field(default_factory=_default_currency)
    is_active: FlagBool = True
    created_at: Optional[str] = None


class CreateAccountInput(Input):
    user_id: PositiveInt
    name: Name
    type: AccountType
    currency: Currency = Field(default_factory=_default_currency)
    is_active: bool = True


class UpdateAccountInput(Input):
    name: Optional[Name] = None
    is_active: Optional[bool] = None
    currency: Optional[Currency] = None

    def to_payload(self) -> dict:
        # PATCH semantics: only send what changed
        return self.model_dump(mode="json", exclude_none=True)


class Category(Record):
    id: PositiveInt
    user_id: Optional[PositiveInt] = None  # None = global/shared
    name: str
    kind: CategoryKind


class CreateCategoryInput(Input):
    user_id: Optional[PositiveInt] = None
    name: Name
    kind: CategoryKind


# ---------- Pay periods ----------


class PayPeriod(Record):
    id: PositiveInt
    user_id: PositiveInt
    pay_date: CalendarDate
    gross_income_cents: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[str] = None


class UpsertPayPeriodInput(Input):
    user_id: PositiveInt
    pay_date: InputDate
    gross_income_cents: Optional[int] = Field(default=None, ge=0)
    note: Optional[str] = None


class PayPeriodSummary(Record):
    pay_period_id: PositiveInt
    pay_date: CalendarDate
    gross_income_cents: int  # declared income for the period
    additional_income_cents: int  # income transactions
    expenses_out_cents: int  # expense + transfer transactions (<= 0)
    savings_out_cents: int  # net savings entries
    reserved_planned_cents: int  # planned payments not yet realised
    leftover_cents: int


class PlannedPayment(Record):
    id: PositiveInt
    user_id: PositiveInt
    account_id: Optional[PositiveInt] = None
    description: str
    amount_cents: int
    due_date: CalendarDate
    status: PlannedStatus = PlannedStatus.planned
    linked_txn_id: Optional[PositiveInt] = None


# ---------- Transactions ----------


class Transaction(Record):
    id: PositiveInt
    user_id: PositiveInt
    pay_period_id: Optional[PositiveInt] = None
    account_id: PositiveInt
    category_id: Optional[PositiveInt] = None
    type: TxnType
    amount_cents: int  # signed as stored by the caller
    description: Optional[str] = None
    txn_date: CalendarDate
    planned_payment_id: Optional[PositiveInt] = None
    counterparty_user_id: Optional[PositiveInt] = None
    created_at: Optional[str] = None


class CreateTransactionInput(Input):
    user_id: PositiveInt
    pay_period_id: Optional[PositiveInt] = None
    account_id: PositiveInt
    category_id: Optional[PositiveInt] = None
    type: TxnType
    amount_cents: int
    description: Optional[str] = None
    txn_date: InputDate
    planned_payment_id: Optional[PositiveInt] = None
    counterparty_user_id: Optional[PositiveInt] = None

    @classmethod
    def from_form(
        cls,
        *,
        amount: Union[str, float, int],
        type: Union[TxnType, str],
        **fields: Any,
    ) -> "CreateTransactionInput":
        """
        Build from a form where the user typed an unsigned decimal amount.
        The amount is converted to cents and signed by `type`.
        Empty-string / 0 pickers mean "not set".
        """
        try:
            txn_type = TxnType(type)
        except ValueError:
            raise ValidationFailed.single("type", "Invalid transaction type") from None
        try:
            cents = to_cents(amount)
        except ValueError as ex:
            raise ValidationFailed.single("amount_cents", str(ex)) from None
        for key in ("pay_period_id", "category_id"):
            if fields.get(key) in ("", 0):
                fields[key] = None
        return parse_record(
            cls,
            dict(fields, type=txn_type, amount_cents=signed_amount(txn_type, abs(cents))),
        )


class UpdateTransactionInput(CreateTransactionInput):
    """Same shape as create; the id travels in the URL."""


# ---------- Savings ----------


class SavingEntry(Record):
    id: PositiveInt
    user_id: PositiveInt
    pay_period_id: Optional[PositiveInt] = None
    account_id: PositiveInt
    amount_cents: int  # > 0 deposit, < 0 withdrawal
    entry_date: CalendarDate
    note: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_deposit(self) -> bool:
        return self.amount_cents > 0


class CreateSavingEntryInput(Input):
    user_id: PositiveInt
    pay_period_id: Optional[PositiveInt] = None
    account_id: PositiveInt
    amount_cents: int
    entry_date: InputDate
    note: Optional[str] = None
    # optional "create and allocate" in one call
    goal_id: Optional[PositiveInt] = None
    goal_amount_cents: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_goal_link(self) -> "CreateSavingEntryInput":
        if self.amount_cents == 0:
            raise ValueError("Amount must not be zero")
        if self.goal_amount_cents is not None and self.goal_id is None:
            raise ValueError("goal_amount_cents requires goal_id")
        if self.goal_id is not None:
            if self.amount_cents < 0:
                raise ValueError("Only deposits can be assigned to a goal")
            if (self.goal_amount_cents or 0) > self.amount_cents:
                raise ValueError("Goal amount cannot exceed the entry amount")
        return self


class SavingGoal(Record):
    id: PositiveInt
    user_id: PositiveInt
    name: str
    target_amount_cents: int = Field(ge=0)
    target_date: Optional[CalendarDate] = None
    note: Optional[str] = None
    created_at: Optional[str] = None
    # aggregates filled in by the allocation query (not stored)
    saved_cents: int = 0
    remaining_cents: Optional[int] = None
    assigned_entry_ids: Annotated[Tuple[int, ...], BeforeValidator(_entry_ids)] = ()


class CreateSavingGoalInput(Input):
    user_id: PositiveInt
    name: Name
    target_amount_cents: int = Field(ge=1)
    target_date: Optional[InputDate] = None
    note: Optional[str] = None


class Allocation(Record):
    saving_entry_id: PositiveInt
    goal_id: PositiveInt
    amount_cents: int = Field(gt=0)


class GoalAllocation(Record):
    goal_id: PositiveInt
    goal_name: str
    amount_cents: int


class EntryAllocations(Record):
    entry_id: PositiveInt
    entry_amount_cents: int
    total_allocated_cents: int
    unassigned_cents: int
    allocations: Tuple[GoalAllocation, ...] = ()


class AssignAmountInput(Input):
    amount_cents: int = Field(gt=0)


# ---------- Small response envelopes ----------


class Health(Record):
    ok: bool
    service: str
    ts: Optional[Union[str, float]] = None


class DbPing(Record):
    ok: bool


class Created(Record):
    id: PositiveInt


class CreatedSavingEntry(Created):
    goal_linked: Optional[bool] = None
    goal_amount_cents: Optional[int] = None


class Updated(Record):
    updated: bool


class Deleted(Record):
    deleted: bool


class Linked(Record):
    linked: bool


class Unlinked(Record):
    unlinked: bool
    amount_cents_freed: int = 0


class Message(Record):
    message: str


# ---------- Parsing boundary ----------


def _field_errors(exc: ValidationError, prefix: str = "") -> List[FieldError]:
    out: List[FieldError] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        field = ".".join(p for p in (prefix, loc) if p) or "__root__"
        msg = str(err.get("msg", "invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]
        out.append(FieldError(field, msg))
    return out


def parse_record(model: Type[M], data: Any) -> M:
    """Validate one record; raise ValidationFailed with field-scoped messages."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(_field_errors(exc)) from None


def parse_records(model: Type[M], rows: Any) -> List[M]:
    """Validate a list of records (e.g. a list endpoint's body)."""
    if not isinstance(rows, (list, tuple)):
        raise ValidationFailed.single("__root__", "Expected a list")
    out: List[M] = []
    errors: List[FieldError] = []
    for i, row in enumerate(rows):
        try:
            out.append(model.model_validate(row))
        except ValidationError as exc:
            errors.extend(_field_errors(exc, prefix=str(i)))
    if errors:
        raise ValidationFailed(errors)
    return out
