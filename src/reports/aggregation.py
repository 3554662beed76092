"""
Transaction Aggregation

DESIGN DECISION: Every figure on the dashboard and reports screens is
DERIVED from the current transaction list on demand. Nothing here is
stored, cached or mutated; each function is a pure reduction.

- Sums use Decimal so money never picks up float rounding.
- Percentages and the savings rate are floats (display values).
- Grouping is by exact category string; unknown categories are
  aggregated like any other.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from src.models.transaction import (
    CategoryTotal,
    DashboardSummary,
    ReportSummary,
    Transaction,
    TransactionType,
    ensure_utc,
)


ZERO = Decimal("0")


def sum_by_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> Decimal:
    """Sum the amounts of transactions of one type. Empty input sums to 0."""
    return sum(
        (t.amount for t in transactions if t.type == transaction_type),
        ZERO,
    )


def net_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expenses."""
    return sum((t.signed_amount for t in transactions), ZERO)


def savings_rate(income: Decimal, expenses: Decimal) -> float:
    """
    Net savings as a percentage of income.

    With no income the rate is 0.0. That is a display fallback, not
    a measured rate; callers that need to tell the two apart should
    check income themselves.
    """
    if income <= 0:
        return 0.0
    return float((income - expenses) / income * 100)


def category_totals(transactions: Sequence[Transaction]) -> list[CategoryTotal]:
    """
    Group by category, sum each group, and compute its share of the total.

    Ordered by amount, largest first; equal amounts keep first-seen order.
    Empty input gives an empty list. If every amount is zero each group
    gets a 0.0 percentage instead of dividing by zero.
    """
    groups: dict[str, Decimal] = {}
    for t in transactions:
        groups[t.category] = groups.get(t.category, ZERO) + t.amount

    total = sum(groups.values(), ZERO)

    totals = [
        CategoryTotal(
            category=category,
            amount=amount,
            percentage=float(amount / total * 100) if total > 0 else 0.0,
        )
        for category, amount in groups.items()
    ]
    # sorted() is stable, and dicts preserve insertion order
    return sorted(totals, key=lambda ct: ct.amount, reverse=True)


def recent_transactions(
    transactions: Sequence[Transaction],
    n: int,
) -> list[Transaction]:
    """The n newest transactions. Ties in timestamp keep input order."""
    if n <= 0:
        return []
    return sort_newest_first(transactions)[:n]


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable sort by timestamp, newest first."""
    return sorted(transactions, key=lambda t: t.timestamp, reverse=True)


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: Optional[datetime],
    end: Optional[datetime],
) -> list[Transaction]:
    """
    Keep transactions with start <= timestamp <= end.

    A None bound is open on that side.
    """
    start = ensure_utc(start) if start is not None else None
    end = ensure_utc(end) if end is not None else None

    result = []
    for t in transactions:
        if start is not None and t.timestamp < start:
            continue
        if end is not None and t.timestamp > end:
            continue
        result.append(t)
    return result


def filter_by_owner(
    transactions: Iterable[Transaction],
    owner_id: str,
) -> list[Transaction]:
    """Keep only the transactions belonging to owner_id."""
    return [t for t in transactions if t.owner_id == owner_id]


def build_dashboard_summary(
    transactions: Sequence[Transaction],
    recent_limit: int = 5,
) -> DashboardSummary:
    """Totals, balance and the most recent transactions for the dashboard."""
    total_income = sum_by_type(transactions, TransactionType.INCOME)
    total_expenses = sum_by_type(transactions, TransactionType.EXPENSE)

    return DashboardSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_balance=net_balance(transactions),
        recent_transactions=recent_transactions(transactions, recent_limit),
    )


def build_report_summary(transactions: Sequence[Transaction]) -> ReportSummary:
    """All reports-screen figures for an already window-filtered list."""
    income = [t for t in transactions if t.type == TransactionType.INCOME]
    expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]

    total_income = sum_by_type(income, TransactionType.INCOME)
    total_expenses = sum_by_type(expenses, TransactionType.EXPENSE)

    return ReportSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=total_income - total_expenses,
        savings_rate=savings_rate(total_income, total_expenses),
        expenses_by_category=category_totals(expenses),
        income_by_category=category_totals(income),
        transactions=list(transactions),
    )
