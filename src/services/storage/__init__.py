"""
Storage Services Package

Provides the abstract record-store interface and concrete implementations.
Google Sheets is the remote backend; the in-memory store backs tests and demo mode.
"""

from src.services.storage.interface import (
    KeyGenerationError,
    NotFoundError,
    StorageError,
    StoreConnectionError,
    StoreReadError,
    StoreWriteError,
    TransactionStoreInterface,
)
from src.services.storage.keys import PushIdGenerator, generate_push_id
from src.services.storage.memory import InMemoryTransactionStore
from src.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStore,
)

__all__ = [
    # Interfaces
    "TransactionStoreInterface",
    # Exceptions
    "KeyGenerationError",
    "NotFoundError",
    "StorageError",
    "StoreConnectionError",
    "StoreReadError",
    "StoreWriteError",
    # Keys
    "PushIdGenerator",
    "generate_push_id",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStore",
    "InMemoryTransactionStore",
]
