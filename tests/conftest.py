"""
Shared fixtures.

Every test runs against in-memory storage, a fixed clock and UTC so
calendar classification never depends on the machine running it.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finanzas.audit import AuditLogger
from finanzas.models import Category, Transaction, TransactionType
from finanzas.services.storage import InMemoryStorage
from finanzas.store import TransactionStore


UTC = timezone.utc

# 15 March 2024, midday
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def make_transaction(
    id: int,
    type: TransactionType = TransactionType.EXPENSE,
    amount="1000",
    category: Category = Category.OTHER,
    date: datetime = NOW,
    description: str = "",
) -> Transaction:
    return Transaction(
        id=id,
        type=type,
        amount=Decimal(str(amount)),
        category=category,
        date=date,
        description=description,
    )


class FixedClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def utc():
    return UTC


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def store(storage, audit_logger):
    store = TransactionStore(storage, audit_logger=audit_logger)
    store.load()
    return store


@pytest.fixture
def make_tx():
    return make_transaction
