"""
Data Models Package

This package contains all Pydantic models used in the GenZ Finance Manager.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    CategoryTotal,
    DashboardSummary,
    ReportSummary,
    TimeRange,
    Transaction,
    TransactionCategory,
    TransactionType,
    UserSession,
    ensure_utc,
    timestamp_for_date,
    utc_now,
)
from src.models.state import (
    DashboardState,
    NewTransactionState,
    ReportsState,
    SettingsState,
    TransactionsState,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CategoryTotal",
    "DashboardSummary",
    "ReportSummary",
    "TimeRange",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "UserSession",
    "ensure_utc",
    "timestamp_for_date",
    "utc_now",
    # Screen state models
    "DashboardState",
    "NewTransactionState",
    "ReportsState",
    "SettingsState",
    "TransactionsState",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
