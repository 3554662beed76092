"""
Transaction Repository

The single entry point screens use to read and write transactions.

DESIGN DECISION: The repository is a thin facade over the record store.
It adds exactly three things:
1. Id assignment on create (the store generates the key)
2. Owner scoping from an explicit UserSession, never a global user id
3. A typed error per failure mode (KeyGenerationError, StoreWriteError,
   StoreReadError, NotFoundError) with the original error chained

There is no retry, batching, caching or offline queue here.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from src.audit import AuditLogger
from src.models.transaction import Transaction, UserSession
from src.reports.aggregation import filter_by_owner
from src.services.storage import (
    KeyGenerationError,
    NotFoundError,
    StoreReadError,
    StoreWriteError,
    TransactionStoreInterface,
)


class TransactionRepository:
    """
    CRUD facade over a TransactionStoreInterface.

    Args:
        store: The record store backend
        audit_logger: Where to log writes and failures
        swallow_list_errors: If True, a failed owner listing returns []
            instead of raising StoreReadError
    """

    def __init__(
        self,
        store: TransactionStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        swallow_list_errors: bool = False,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._swallow_list_errors = swallow_list_errors

    async def add_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Persist a new transaction under a freshly generated id.

        Returns:
            The stored transaction, with its id set

        Raises:
            KeyGenerationError: If the store could not produce a key
            StoreWriteError: If the write failed
        """
        try:
            key = self._store.generate_key()
        except Exception as e:
            self._audit_logger.log_store_error(
                "generate_key", str(e), transaction.owner_id, correlation_id
            )
            raise KeyGenerationError(f"Failed to generate key: {e}") from e

        if not key:
            self._audit_logger.log_store_error(
                "generate_key", "empty key", transaction.owner_id, correlation_id
            )
            raise KeyGenerationError("Failed to generate key")

        stored = transaction.model_copy(update={"id": key})

        try:
            await self._store.put(stored)
        except Exception as e:
            self._audit_logger.log_store_error(
                "add", str(e), transaction.owner_id, correlation_id
            )
            raise StoreWriteError(str(e)) from e

        self._audit_logger.log_transaction_added(
            transaction_id=stored.id,
            owner_id=stored.owner_id,
            amount=str(stored.amount),
            transaction_type=stored.type.value,
            correlation_id=correlation_id,
        )
        return stored

    async def update_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Overwrite the stored record with the same id.

        Raises:
            StoreWriteError: If the transaction has no id or the write failed
        """
        if not transaction.is_persisted:
            raise StoreWriteError("Cannot update a transaction without an id")

        try:
            await self._store.put(transaction)
        except Exception as e:
            self._audit_logger.log_store_error(
                "update", str(e), transaction.owner_id, correlation_id
            )
            raise StoreWriteError(str(e)) from e

        self._audit_logger.log_transaction_updated(
            transaction_id=transaction.id,
            owner_id=transaction.owner_id,
            correlation_id=correlation_id,
        )

    async def delete_transaction(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Delete a transaction by id.

        Raises:
            StoreWriteError: If the delete failed
        """
        try:
            await self._store.remove(transaction_id)
        except Exception as e:
            self._audit_logger.log_store_error(
                "delete", str(e), correlation_id=correlation_id
            )
            raise StoreWriteError(str(e)) from e

        self._audit_logger.log_transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    async def get_transactions_for_owner(
        self,
        owner_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        Every transaction belonging to owner_id, in store order.

        Raises:
            StoreReadError: If the query failed and swallow_list_errors is off
        """
        try:
            transactions = await self._store.query_by_owner(owner_id)
        except Exception as e:
            self._audit_logger.log_store_error(
                "list_for_owner", str(e), owner_id, correlation_id
            )
            if self._swallow_list_errors:
                return []
            raise StoreReadError(str(e)) from e

        self._audit_logger.log_transactions_fetched(
            owner_id=owner_id,
            query="owner",
            result_count=len(transactions),
            correlation_id=correlation_id,
        )
        return transactions

    async def get_transaction_by_id(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Fetch one transaction.

        Raises:
            NotFoundError: If no record has this id
            StoreReadError: If the lookup failed
        """
        try:
            transaction = await self._store.get(transaction_id)
        except Exception as e:
            self._audit_logger.log_store_error(
                "get", str(e), correlation_id=correlation_id
            )
            raise StoreReadError(str(e)) from e

        if transaction is None:
            self._audit_logger.log_transaction_not_found(
                transaction_id, correlation_id
            )
            raise NotFoundError(f"Transaction not found: {transaction_id}")

        return transaction

    async def get_transactions_in_range(
        self,
        owner_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        The owner's transactions with start <= timestamp <= end.

        The range query runs on the store; the owner filter is applied
        here, on the returned records.

        Raises:
            StoreReadError: If the query failed
        """
        try:
            in_range = await self._store.query_by_timestamp(start, end)
        except Exception as e:
            self._audit_logger.log_store_error(
                "list_in_range", str(e), owner_id, correlation_id
            )
            raise StoreReadError(str(e)) from e

        transactions = filter_by_owner(in_range, owner_id)
        self._audit_logger.log_transactions_fetched(
            owner_id=owner_id,
            query="range",
            result_count=len(transactions),
            correlation_id=correlation_id,
        )
        return transactions

    # Session-scoped conveniences used by the screens

    async def list_for_session(self, session: UserSession) -> list[Transaction]:
        return await self.get_transactions_for_owner(session.owner_id)

    async def list_in_range_for_session(
        self,
        session: UserSession,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> list[Transaction]:
        return await self.get_transactions_in_range(session.owner_id, start, end)
