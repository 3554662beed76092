"""
Abstract Storage Interface

DESIGN DECISION: The remote database is treated as an opaque keyed-record
store reached over network calls that can fail. This interface captures
just the operations the repository needs:
1. Generate a fresh key
2. Write / overwrite / remove a record by key
3. Query by owner and by timestamp range

This allows us to:
1. Swap Google Sheets for a document database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

There is no retry, batching or transaction support at this level; last
write wins because every write is a whole-record overwrite keyed by id.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.models.transaction import Transaction


class TransactionStoreInterface(ABC):
    """
    Abstract interface for transaction record storage.

    Any storage implementation (Google Sheets, a document DB, memory)
    must implement these methods.
    """

    @abstractmethod
    def generate_key(self) -> str:
        """
        Produce a new unique record key.

        Raises:
            StorageError: If no key could be generated
        """
        pass

    @abstractmethod
    async def put(self, transaction: Transaction) -> None:
        """
        Write a transaction under its id, replacing any existing record.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def remove(self, transaction_id: str) -> None:
        """
        Remove the record with this id. Removing a missing id is not an error.

        Raises:
            StorageError: If the removal fails
        """
        pass

    @abstractmethod
    async def get(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by id.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def query_by_owner(self, owner_id: str) -> list[Transaction]:
        """
        All transactions whose owner_id equals owner_id, in store order.
        """
        pass

    @abstractmethod
    async def query_by_timestamp(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> list[Transaction]:
        """
        All transactions with start <= timestamp <= end, for every owner.

        A None bound is open on that side. Owner filtering is the
        caller's job.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass


class KeyGenerationError(StorageError):
    """The store could not produce a key for a new record."""
    pass


class StoreWriteError(StorageError):
    """A write, overwrite or delete did not reach the store."""
    pass


class StoreReadError(StorageError):
    """A query against the store failed."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
