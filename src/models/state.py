"""
Screen State Models

Each screen publishes an immutable snapshot of one of these models.
A state holder replaces the snapshot wholesale on every change
(`model_copy(update=...)`), so subscribers never observe a half-updated state.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.transaction import (
    CategoryTotal,
    TimeRange,
    Transaction,
    TransactionCategory,
    TransactionType,
    utc_now,
)


class DashboardState(BaseModel):
    """Dashboard snapshot."""
    model_config = ConfigDict(frozen=True)

    total_balance: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    recent_transactions: list[Transaction] = Field(default_factory=list)
    monthly_transactions: list[Transaction] = Field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None


class ReportsState(BaseModel):
    """Reports snapshot for the selected time range."""
    model_config = ConfigDict(frozen=True)

    is_loading: bool = False
    error: Optional[str] = None
    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_savings: Decimal = Decimal("0")
    savings_rate: float = 0.0
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    income_by_category: list[CategoryTotal] = Field(default_factory=list)
    selected_time_range: TimeRange = TimeRange.MONTH
    transactions: list[Transaction] = Field(default_factory=list)


class NewTransactionState(BaseModel):
    """
    The add-transaction form.

    Raw text is kept as typed; field errors are recomputed on every edit.
    """
    model_config = ConfigDict(frozen=True)

    amount: str = ""
    type: TransactionType = TransactionType.EXPENSE
    category: TransactionCategory = TransactionCategory.OTHER
    description: str = ""
    timestamp: datetime = Field(default_factory=utc_now)
    amount_error: Optional[str] = None
    description_error: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return self.amount_error is not None or self.description_error is not None


class TransactionsState(BaseModel):
    """Transaction list snapshot, newest first."""
    model_config = ConfigDict(frozen=True)

    transactions: list[Transaction] = Field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None
    is_adding_transaction: bool = False
    new_transaction: NewTransactionState = Field(default_factory=NewTransactionState)


class SettingsState(BaseModel):
    """App preferences; kept in memory only."""
    model_config = ConfigDict(frozen=True)

    is_dark_mode: bool = False
    notifications_enabled: bool = True
    currency: str = "USD"
    is_loading: bool = False
    error: Optional[str] = None
    show_currency_dialog: bool = False
    available_currencies: list[str] = Field(
        default_factory=lambda: ["USD", "EUR", "GBP", "JPY", "AUD", "CAD"]
    )
