"""
In-Memory Storage Implementation

Used by the test suite and by the local demo mode (APP_STORAGE_BACKEND=memory).
Records live in a dict keyed by id, in insertion order, so queries return
records in the order they were first written, like a keyed remote store.

Failures can be injected per operation to exercise the error paths of
the repository and the screens without a network.
"""

from datetime import datetime
from typing import Callable, Optional

from src.models.transaction import Transaction, ensure_utc
from src.services.storage.interface import (
    StorageError,
    TransactionStoreInterface,
)
from src.services.storage.keys import generate_push_id


class InMemoryTransactionStore(TransactionStoreInterface):
    """Dict-backed transaction store."""

    def __init__(
        self,
        transactions: Optional[list[Transaction]] = None,
        key_factory: Optional[Callable[[], str]] = None,
    ):
        self._records: dict[str, Transaction] = {}
        self._key_factory = key_factory or generate_push_id
        self._failures: dict[str, Exception] = {}
        for transaction in transactions or []:
            self._records[transaction.id] = transaction

    def fail_on(self, operation: str, error: Optional[Exception] = None) -> None:
        """
        Make every future call of `operation` raise.

        operation is one of: generate_key, put, remove, get,
        query_by_owner, query_by_timestamp.
        """
        self._failures[operation] = error or StorageError(f"{operation} unavailable")

    def clear_failures(self) -> None:
        self._failures.clear()

    def _check(self, operation: str) -> None:
        error = self._failures.get(operation)
        if error is not None:
            raise error

    @property
    def records(self) -> dict[str, Transaction]:
        """Snapshot of the stored records."""
        return dict(self._records)

    def generate_key(self) -> str:
        self._check("generate_key")
        return self._key_factory()

    async def put(self, transaction: Transaction) -> None:
        self._check("put")
        if not transaction.id:
            raise StorageError("Cannot store a transaction without an id")
        self._records[transaction.id] = transaction

    async def remove(self, transaction_id: str) -> None:
        self._check("remove")
        self._records.pop(transaction_id, None)

    async def get(self, transaction_id: str) -> Optional[Transaction]:
        self._check("get")
        return self._records.get(transaction_id)

    async def query_by_owner(self, owner_id: str) -> list[Transaction]:
        self._check("query_by_owner")
        return [t for t in self._records.values() if t.owner_id == owner_id]

    async def query_by_timestamp(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> list[Transaction]:
        self._check("query_by_timestamp")
        start = ensure_utc(start) if start is not None else None
        end = ensure_utc(end) if end is not None else None

        result = [
            t for t in self._records.values()
            if (start is None or t.timestamp >= start)
            and (end is None or t.timestamp <= end)
        ]
        # Range queries come back ordered by the queried child
        result.sort(key=lambda t: t.timestamp)
        return result
