"""Transaction repository package."""

from src.repository.transactions import TransactionRepository

__all__ = ["TransactionRepository"]
