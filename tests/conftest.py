"""Shared fixtures: an in-memory store, a repository over it, a fixed session."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.audit import AuditLogger
from src.models.transaction import Transaction, TransactionType, UserSession
from src.repository import TransactionRepository
from src.services.storage import InMemoryTransactionStore


OWNER = "temp_user_id"
NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


def make_transaction(
    amount: str,
    type: TransactionType = TransactionType.EXPENSE,
    category: str = "Other",
    description: str = "Something",
    days_ago: float = 0,
    owner_id: str = OWNER,
    id: str = "",
) -> Transaction:
    return Transaction(
        id=id,
        amount=Decimal(amount),
        type=type,
        category=category,
        description=description,
        timestamp=NOW - timedelta(days=days_ago),
        owner_id=owner_id,
    )


@pytest.fixture
def session() -> UserSession:
    return UserSession(owner_id=OWNER)


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def store() -> InMemoryTransactionStore:
    return InMemoryTransactionStore()


@pytest.fixture
def repository(store, audit_logger) -> TransactionRepository:
    return TransactionRepository(store=store, audit_logger=audit_logger)
