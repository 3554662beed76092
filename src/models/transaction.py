"""
Core Data Models for GenZ Finance Manager

These models define the schemas for all transaction data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: The sign of an amount lives in `type`, never in the number.
Amounts are non-negative Decimals; aggregation decides whether to add or subtract.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so every comparison is between aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def timestamp_for_date(day: date, now: Optional[datetime] = None) -> datetime:
    """
    The picked calendar day at the current UTC time of day.

    A transaction entered for today is therefore never later than now,
    so it falls inside every reporting window ending now.
    """
    now = ensure_utc(now) if now is not None else utc_now()
    return datetime.combine(day, now.timetz())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """
    Categories offered by the add-transaction form.

    DESIGN DECISION: The stored `Transaction.category` is free text (the
    display name at the time of saving), not this enum. Records with
    unknown or renamed categories must still aggregate cleanly.
    """
    FOOD = "food"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    TRANSPORT = "transport"
    BILLS = "bills"
    EDUCATION = "education"
    HEALTH = "health"
    SALARY = "salary"
    INVESTMENT = "investment"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES = {
    TransactionCategory.FOOD: "Food & Dining",
    TransactionCategory.SHOPPING: "Shopping",
    TransactionCategory.ENTERTAINMENT: "Entertainment",
    TransactionCategory.TRANSPORT: "Transportation",
    TransactionCategory.BILLS: "Bills & Utilities",
    TransactionCategory.EDUCATION: "Education",
    TransactionCategory.HEALTH: "Health & Wellness",
    TransactionCategory.SALARY: "Salary",
    TransactionCategory.INVESTMENT: "Investment",
    TransactionCategory.OTHER: "Other",
}


class TimeRange(str, Enum):
    """Reporting windows selectable on the reports screen."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense event.

    The store assigns `id` on creation; before that it is empty.
    Records are never mutated in place, callers use `model_copy`.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default="",
        description="Store-assigned key, empty until persisted"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative magnitude; direction is given by type"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="Income or expense"
    )
    category: str = Field(
        default="",
        max_length=100,
        description="Category display name (free text)"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="What the transaction was for"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the transaction occurred (UTC)"
    )
    owner_id: str = Field(
        default="",
        description="User the transaction belongs to"
    )

    @field_validator('timestamp')
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def is_persisted(self) -> bool:
        """True once the store has assigned an id."""
        return bool(self.id)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the type."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def to_record(self) -> dict[str, Any]:
        """
        Convert to a flat record for the remote store.

        All values are plain strings or numbers so any keyed-record
        backend (sheets, document DBs) can hold them.
        """
        return {
            "id": self.id,
            "amount": str(self.amount),
            "type": self.type.value,
            "category": self.category,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Transaction":
        """Build a Transaction from a flat store record."""
        return cls(
            id=str(record.get("id") or ""),
            amount=Decimal(str(record.get("amount") or "0")),
            type=TransactionType(record.get("type") or TransactionType.EXPENSE.value),
            category=str(record.get("category") or ""),
            description=str(record.get("description") or ""),
            timestamp=datetime.fromisoformat(str(record["timestamp"])),
            owner_id=str(record.get("owner_id") or ""),
        )


# =============================================================================
# DERIVED MODELS (never persisted)
# =============================================================================

class CategoryTotal(BaseModel):
    """Per-category sum and its share of the group total."""
    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal = Field(ge=0)
    percentage: float = Field(
        ge=0.0,
        description="Share of the group total, 0-100"
    )


class DashboardSummary(BaseModel):
    """Figures shown on the dashboard."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")
    recent_transactions: list[Transaction] = Field(default_factory=list)


class ReportSummary(BaseModel):
    """Figures shown on the reports screen for one time window."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_savings: Decimal = Decimal("0")
    savings_rate: float = 0.0
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    income_by_category: list[CategoryTotal] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)


class UserSession(BaseModel):
    """
    Explicit session context passed to every repository call.

    There is no real authentication; the owner id comes from configuration.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    owner_id: str = Field(
        ...,
        min_length=1,
        description="Id of the user whose transactions are shown"
    )
    started_at: datetime = Field(default_factory=utc_now)
