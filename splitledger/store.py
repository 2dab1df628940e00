"""
In-memory ledger of members, expenses and expense splits.

The store is the write path: it validates every request so that the balance
calculator can assume a consistent snapshot. Reads and writes share one lock,
so ``snapshot()`` never observes an expense without all of its splits.
"""

import itertools
import logging
import threading
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from splitledger.balances import compute_balances
from splitledger.errors import (
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from splitledger.models import (
    CENT,
    EPSILON,
    ZERO,
    Amount,
    Balance,
    Expense,
    ExpenseRecord,
    ExpenseSplit,
    Member,
    Settlement,
    to_decimal,
)
from splitledger.settlement import settle

logger = logging.getLogger(__name__)

Snapshot = Tuple[List[Member], List[Expense], List[ExpenseSplit]]


def equal_shares(amount: Amount, count: int) -> List[Decimal]:
    """
    Split ``amount`` into ``count`` cent-exact shares that sum to it exactly.

    Leftover cents go one each to the first shares, e.g. 100 / 3 gives
    33.34, 33.33, 33.33.
    """
    cents = int((to_decimal(amount) / CENT).to_integral_value())
    base, remainder = divmod(cents, count)
    return [
        (base + (1 if index < remainder else 0)) * CENT
        for index in range(count)
    ]


class LedgerStore:

    def __init__(self):
        self._lock = threading.RLock()
        self._members: Dict[int, Member] = {}
        self._expenses: Dict[int, Expense] = {}
        self._splits: Dict[int, List[ExpenseSplit]] = {}
        self._member_ids = itertools.count(1)
        self._expense_ids = itertools.count(1)

    # ----------------------------------------------------------------- members

    def add_member(self, name: str) -> Member:
        if not name or not name.strip():
            raise InvalidArgumentError("member name must not be empty")
        with self._lock:
            member = Member(id=next(self._member_ids), name=name.strip())
            self._members[member.id] = member
        logger.info("Added member %s (%s)", member.id, member.name)
        return member

    def get_member(self, member_id: int) -> Member:
        with self._lock:
            try:
                return self._members[member_id]
            except KeyError:
                raise NotFoundError("member", member_id) from None

    def list_members(self) -> List[Member]:
        with self._lock:
            return sorted(self._members.values(), key=lambda m: m.name)

    def delete_member(self, member_id: int) -> None:
        """Delete a member who never paid for anything and holds no split."""
        with self._lock:
            self.get_member(member_id)
            if any(e.payer_id == member_id for e in self._expenses.values()):
                raise FailedPreconditionError(
                    "cannot delete member who has paid for expenses"
                )
            if any(
                split.member_id == member_id
                for splits in self._splits.values()
                for split in splits
            ):
                raise FailedPreconditionError(
                    "cannot delete member who is part of expense splits"
                )
            del self._members[member_id]
        logger.info("Deleted member %s", member_id)

    # ---------------------------------------------------------------- expenses

    def add_expense(
        self,
        description: str,
        amount: Amount,
        payer_id: int,
        splits: Iterable[Tuple[int, Amount]],
    ) -> ExpenseRecord:
        """
        Record an expense with custom splits.

        ``splits`` is a sequence of ``(member_id, amount)`` pairs whose amounts
        must sum to ``amount`` within one cent.
        """
        amount = to_decimal(amount)
        shares = [(member_id, to_decimal(share)) for member_id, share in splits]

        if amount <= ZERO:
            raise InvalidArgumentError("amount must be positive")
        if any(share < ZERO for _, share in shares):
            raise InvalidArgumentError("split amounts must not be negative")
        total = sum((share for _, share in shares), ZERO)
        if abs(total - amount) > EPSILON:
            raise InvalidArgumentError(
                "splits must sum to the total amount",
                details={"amount": str(amount), "splitTotal": str(total)},
            )

        with self._lock:
            self.get_member(payer_id)
            for member_id, _ in shares:
                self.get_member(member_id)

            expense = Expense(
                id=next(self._expense_ids),
                payer_id=payer_id,
                amount=amount,
                description=description,
            )
            self._expenses[expense.id] = expense
            self._splits[expense.id] = [
                ExpenseSplit(expense_id=expense.id, member_id=member_id, amount=share)
                for member_id, share in shares
            ]
            record = ExpenseRecord(expense, list(self._splits[expense.id]))

        logger.info(
            "Added expense %s: %s paid %s split %d ways",
            expense.id, payer_id, amount, len(shares),
        )
        return record

    def add_equal_expense(
        self,
        description: str,
        amount: Amount,
        payer_id: int,
        member_ids: Sequence[int],
    ) -> ExpenseRecord:
        """Record an expense shared equally among ``member_ids``."""
        if not member_ids:
            raise InvalidArgumentError("at least one member must be specified")
        shares = equal_shares(amount, len(member_ids))
        return self.add_expense(description, amount, payer_id, zip(member_ids, shares))

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense together with its splits."""
        with self._lock:
            if expense_id not in self._expenses:
                raise NotFoundError("expense", expense_id)
            del self._expenses[expense_id]
            del self._splits[expense_id]
        logger.info("Deleted expense %s", expense_id)

    def list_expenses(self) -> List[ExpenseRecord]:
        """Expenses with their splits, newest first."""
        with self._lock:
            records = [
                ExpenseRecord(expense, list(self._splits[expense.id]))
                for expense in self._expenses.values()
            ]
        records.reverse()
        records.sort(key=lambda r: r.expense.created_at, reverse=True)
        return records

    def member_names(self) -> Dict[int, str]:
        with self._lock:
            return {member.id: member.name for member in self._members.values()}

    # ------------------------------------------------------------------- reads

    def snapshot(self) -> Snapshot:
        """Members, expenses and splits taken under one lock."""
        with self._lock:
            members = self.list_members()
            expenses = list(self._expenses.values())
            splits = [s for splits in self._splits.values() for s in splits]
        return members, expenses, splits

    def balances(self) -> List[Balance]:
        return compute_balances(*self.snapshot())

    def settlements(self) -> List[Settlement]:
        return settle(*self.snapshot())[1]
