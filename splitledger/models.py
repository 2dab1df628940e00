"""
Ledger records shared by the balance calculator, the settlement planner and
the store.

All money values are ``Decimal``. Anything else is routed through ``str()``
first so that ``0.1`` becomes ``Decimal("0.1")`` rather than its binary
approximation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Union

# One currency minor unit. Governs "is this member even" and loop termination.
EPSILON = Decimal("0.01")
CENT = Decimal("0.01")
ZERO = Decimal("0")

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """Convert an amount to Decimal without float drift."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(value: Decimal) -> bool:
    """True when a balance sits inside the +/-0.01 band around zero."""
    return abs(value) < EPSILON


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Member:
    id: int
    name: str
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Expense:
    """Money one member advanced on behalf of the group."""

    id: int
    payer_id: int
    amount: Decimal
    description: str = ""
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class ExpenseSplit:
    """One member's share of one expense."""

    expense_id: int
    member_id: int
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class ExpenseRecord:
    """An expense together with its splits, as listed by the store."""

    expense: Expense
    splits: List[ExpenseSplit]

    def to_dict(self, names: Dict[int, str]) -> Dict[str, Any]:
        expense = self.expense
        return {
            "id": expense.id,
            "description": expense.description,
            "amount": float(expense.amount),
            "payerId": expense.payer_id,
            "payerName": names.get(expense.payer_id),
            "createdAt": expense.created_at.isoformat(),
            "splits": [
                {
                    "expenseId": split.expense_id,
                    "memberId": split.member_id,
                    "memberName": names.get(split.member_id),
                    "amount": float(split.amount),
                }
                for split in sorted(
                    self.splits, key=lambda s: names.get(s.member_id) or ""
                )
            ],
        }


@dataclass(frozen=True)
class Balance:
    """
    Net position of one member.

    Positive ``balance`` means the group owes the member money, negative means
    the member owes the group.
    """

    member_id: int
    member_name: str
    total_paid: Decimal
    total_owed: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "memberId": self.member_id,
            "memberName": self.member_name,
            "totalPaid": float(self.total_paid),
            "totalOwed": float(self.total_owed),
            "balance": float(self.balance),
        }


@dataclass(frozen=True)
class Settlement:
    """A suggested payment. Never persisted or marked as executed."""

    from_member_id: int
    from_member_name: str
    to_member_id: int
    to_member_name: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fromMemberId": self.from_member_id,
            "fromMemberName": self.from_member_name,
            "toMemberId": self.to_member_id,
            "toMemberName": self.to_member_name,
            "amount": float(self.amount),
        }
