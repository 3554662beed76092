"""Services package."""

from src.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStore,
    InMemoryTransactionStore,
    KeyGenerationError,
    NotFoundError,
    StorageError,
    StoreConnectionError,
    StoreReadError,
    StoreWriteError,
    TransactionStoreInterface,
)

__all__ = [
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStore",
    "InMemoryTransactionStore",
    "KeyGenerationError",
    "NotFoundError",
    "StorageError",
    "StoreConnectionError",
    "StoreReadError",
    "StoreWriteError",
    "TransactionStoreInterface",
]
