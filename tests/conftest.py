from decimal import Decimal

import pytest

from splitledger.app import create_app
from splitledger.config import AppConfig
from splitledger.models import Balance, Expense, ExpenseSplit, Member
from splitledger.store import LedgerStore


def _make_balance(member_id, name, value) -> Balance:
    """Balance row with only the net figure filled in meaningfully."""
    value = Decimal(str(value))
    paid = value if value > 0 else Decimal("0")
    return Balance(
        member_id=member_id,
        member_name=name,
        total_paid=paid,
        total_owed=paid - value,
        balance=value,
    )


@pytest.fixture
def make_balance():
    return _make_balance


@pytest.fixture
def trio():
    """Alice pays 90 shared equally by Alice, Bob and Carol."""
    members = [Member(1, "Alice"), Member(2, "Bob"), Member(3, "Carol")]
    expenses = [Expense(id=1, payer_id=1, amount=90)]
    splits = [
        ExpenseSplit(expense_id=1, member_id=1, amount=30),
        ExpenseSplit(expense_id=1, member_id=2, amount=30),
        ExpenseSplit(expense_id=1, member_id=3, amount=30),
    ]
    return members, expenses, splits


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore()


@pytest.fixture
def client(store):
    app = create_app(config=AppConfig(), store=store)
    app.config["TESTING"] = True
    return app.test_client()
