"""
Transactions screen state

Owns the transaction list (newest first) and the add-transaction form.
Field errors are recomputed on every edit so the form can show them live;
save re-validates everything before touching the repository.
"""

from datetime import datetime
from typing import Optional

from src.audit import AuditLogger, create_correlation_id
from src.models.state import NewTransactionState, TransactionsState
from src.models.transaction import (
    Transaction,
    TransactionCategory,
    TransactionType,
    UserSession,
)
from src.reports import sort_newest_first
from src.repository import TransactionRepository
from src.services.storage import StorageError
from src.state.store import ScreenStateHolder
from src.validation import TransactionValidationError, TransactionValidator


class TransactionsStateHolder(ScreenStateHolder[TransactionsState]):
    """List, add and delete transactions for the session owner."""

    screen_name = "transactions"

    def __init__(
        self,
        repository: TransactionRepository,
        session: UserSession,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(TransactionsState(), audit_logger)
        self._repository = repository
        self._session = session
        self._validator = validator or TransactionValidator()
        self._load_error: Optional[str] = None

    def start(self):
        return self._launch(self.refresh())

    async def refresh(self) -> None:
        """
        Reload the list, newest first.

        A successful reload clears only an error left by an earlier load.
        Save and delete failures stay visible until clear_error().
        """
        generation = self._begin_request()
        self._store.update(is_loading=True)

        try:
            transactions = await self._repository.get_transactions_for_owner(
                self._session.owner_id
            )
        except StorageError as e:
            if self._is_current(generation):
                self._load_error = f"Failed to load transactions: {e}"
                self._store.update(is_loading=False, error=self._load_error)
            return

        if not self._is_current(generation):
            return

        error = self.state.error
        if error is not None and error == self._load_error:
            error = None
        self._load_error = None
        self._store.update(
            transactions=sort_newest_first(transactions),
            is_loading=False,
            error=error,
        )

    # -------------------------------------------------------------------------
    # Add-transaction form
    # -------------------------------------------------------------------------

    def _update_form(self, **changes) -> NewTransactionState:
        form = self.state.new_transaction.model_copy(update=changes)
        self._store.update(new_transaction=form)
        return form

    def on_amount_changed(self, amount: str) -> None:
        issue = self._validator.validate_amount(amount)
        self._update_form(
            amount=amount,
            amount_error=issue.message if issue else None,
        )

    def on_description_changed(self, description: str) -> None:
        issue = self._validator.validate_description(description)
        self._update_form(
            description=description,
            description_error=issue.message if issue else None,
        )

    def on_type_changed(self, transaction_type: TransactionType) -> None:
        self._update_form(type=transaction_type)

    def on_category_changed(self, category: TransactionCategory) -> None:
        self._update_form(category=category)

    def on_date_changed(self, timestamp: datetime) -> None:
        self._update_form(timestamp=timestamp)

    def open_add_form(self) -> None:
        self._store.update(is_adding_transaction=True)

    def dismiss_add_form(self) -> None:
        self._store.update(
            is_adding_transaction=False,
            new_transaction=NewTransactionState(),
        )

    async def save_transaction(self) -> Optional[Transaction]:
        """
        Validate the form and add the transaction.

        Returns:
            The stored transaction, or None if validation or the write failed
        """
        correlation_id = create_correlation_id()
        form = self.state.new_transaction

        try:
            transaction = self._validator.build_transaction(form, self._session)
        except TransactionValidationError as e:
            errors = {issue.field: issue.message for issue in e.issues}
            self._update_form(
                amount_error=errors.get("amount"),
                description_error=errors.get("description"),
            )
            self._audit_logger.log_validation_failed(
                TransactionValidator.issues_to_dicts(e.issues),
                owner_id=self._session.owner_id,
                correlation_id=correlation_id,
            )
            return None

        try:
            stored = await self._repository.add_transaction(
                transaction, correlation_id=correlation_id
            )
        except StorageError as e:
            if not self._closed:
                self._store.update(error=f"Failed to save transaction: {e}")
            return None

        if self._closed:
            return stored

        self._store.update(
            is_adding_transaction=False,
            new_transaction=NewTransactionState(),
            error=None,
        )
        await self.refresh()
        return stored

    async def delete_transaction(self, transaction_id: str) -> bool:
        """Delete by id and reload. Returns False if the delete failed."""
        try:
            await self._repository.delete_transaction(
                transaction_id, correlation_id=create_correlation_id()
            )
        except StorageError as e:
            if not self._closed:
                self._store.update(error=f"Failed to delete transaction: {e}")
            return False

        if not self._closed:
            await self.refresh()
        return True

    def clear_error(self) -> None:
        self._store.update(error=None)
