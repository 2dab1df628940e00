"""
splitledger: shared expenses for a travel group, and who owes whom.

The engine is two pure functions, ``compute_balances`` and
``plan_settlements``; the store and the Flask app around them are the
collaborators that feed it consistent snapshots.
"""

from splitledger.balances import compute_balances
from splitledger.models import (
    EPSILON,
    Balance,
    Expense,
    ExpenseRecord,
    ExpenseSplit,
    Member,
    Settlement,
    is_settled,
)
from splitledger.settlement import apply_settlements, plan_settlements, settle

__all__ = [
    "EPSILON",
    "Balance",
    "Expense",
    "ExpenseRecord",
    "ExpenseSplit",
    "Member",
    "Settlement",
    "is_settled",
    "compute_balances",
    "plan_settlements",
    "apply_settlements",
    "settle",
]
