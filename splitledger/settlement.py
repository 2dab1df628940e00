# splitledger/settlement.py

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Tuple

from splitledger.balances import compute_balances
from splitledger.models import (
    EPSILON,
    Balance,
    Expense,
    ExpenseSplit,
    Member,
    Settlement,
    is_settled,
    round_cents,
)

logger = logging.getLogger(__name__)


def plan_settlements(balances: Iterable[Balance]) -> List[Settlement]:
    """
    Greedy debt simplification over a balance snapshot.

    The largest debtor is matched against the largest creditor until one of
    them is even, then the cursor on that side moves on. Heuristic, not a
    minimum-cardinality matching, but never more than
    ``debtors + creditors - 1`` payments for a zero-sum snapshot.

    The input balances are not modified; working copies are updated instead.
    """
    # 1. Separate Debtors and Creditors
    debtors = []
    creditors = []

    for entry in balances:
        if entry.balance < -EPSILON:
            debtors.append({'member': entry, 'balance': entry.balance})
        elif entry.balance > EPSILON:
            creditors.append({'member': entry, 'balance': entry.balance})

    debtors.sort(key=lambda x: x['balance'])
    creditors.sort(key=lambda x: x['balance'], reverse=True)

    # 2. Match them up
    settlements = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(-debtor['balance'], creditor['balance'])
        if amount > EPSILON:
            settlements.append(Settlement(
                from_member_id=debtor['member'].member_id,
                from_member_name=debtor['member'].member_name,
                to_member_id=creditor['member'].member_id,
                to_member_name=creditor['member'].member_name,
                amount=round_cents(amount),
            ))
            debtor['balance'] += amount
            creditor['balance'] -= amount

        advanced = False
        if is_settled(debtor['balance']):
            i += 1
            advanced = True
        if is_settled(creditor['balance']):
            j += 1
            advanced = True

        # A residual of exactly one cent is too small to pay and too large to
        # count as even; drop whichever side it belongs to.
        if not advanced:
            if -debtor['balance'] == amount:
                i += 1
            if creditor['balance'] == amount:
                j += 1

    logger.debug(
        "Planned %d settlements for %d debtors and %d creditors",
        len(settlements), len(debtors), len(creditors),
    )
    return settlements


def settle(
    members: Iterable[Member],
    expenses: Iterable[Expense],
    splits: Iterable[ExpenseSplit],
) -> Tuple[List[Balance], List[Settlement]]:
    """Run the full pipeline over one snapshot."""
    balances = compute_balances(members, expenses, splits)
    return balances, plan_settlements(balances)


def apply_settlements(
    balances: Sequence[Balance], settlements: Iterable[Settlement]
) -> Dict[int, Decimal]:
    """
    Net balance per member id after every settlement has been paid.

    Advisory only: used to check that a plan actually clears the ledger.
    """
    remaining = {entry.member_id: entry.balance for entry in balances}
    for payment in settlements:
        remaining[payment.from_member_id] += payment.amount
        remaining[payment.to_member_id] -= payment.amount
    return remaining
