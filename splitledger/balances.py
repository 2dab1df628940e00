"""Reduce expense and split records into one net balance per member."""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from splitledger.models import ZERO, Balance, Expense, ExpenseSplit, Member

logger = logging.getLogger(__name__)


def compute_balances(
    members: Iterable[Member],
    expenses: Iterable[Expense],
    splits: Iterable[ExpenseSplit],
) -> List[Balance]:
    """
    Compute ``total_paid``, ``total_owed`` and the net balance of every member.

    Expects a complete, consistent snapshot: the splits of each expense are
    assumed to sum to its amount. Records pointing at unknown members are not
    attributed to anyone, so a broken snapshot yields balances that do not sum
    to zero. That is left for the write path to prevent.

    Result is ordered by member name; members sharing a name keep input order.
    """
    members = list(members)
    paid: Dict[int, Decimal] = {member.id: ZERO for member in members}
    owed: Dict[int, Decimal] = {member.id: ZERO for member in members}

    # 1. What each member advanced
    for expense in expenses:
        if expense.payer_id in paid:
            paid[expense.payer_id] += expense.amount

    # 2. What each member consumed
    for split in splits:
        if split.member_id in owed:
            owed[split.member_id] += split.amount

    balances = [
        Balance(
            member_id=member.id,
            member_name=member.name,
            total_paid=paid[member.id],
            total_owed=owed[member.id],
            balance=paid[member.id] - owed[member.id],
        )
        for member in members
    ]
    balances.sort(key=lambda b: b.member_name)

    logger.debug("Computed balances for %d members", len(balances))
    return balances
