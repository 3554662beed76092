"""
Main Orchestrator for GenZ Finance Manager

This module ties together all the components:
1. Configuration → logging, store backend, session
2. Store → repository
3. Repository + session → one state holder per screen

DESIGN DECISION: The session (owner id) is created here once and injected
into every state holder. Nothing downstream reads a global user id.
"""

from typing import Optional

from src.audit import AuditLogger, configure_logging
from src.config import get_settings
from src.config.settings import AppSettings
from src.models.transaction import TimeRange, UserSession
from src.repository import TransactionRepository
from src.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStore,
    InMemoryTransactionStore,
    TransactionStoreInterface,
)
from src.state import (
    DashboardStateHolder,
    ReportsStateHolder,
    SettingsStateHolder,
    TransactionsStateHolder,
)
from src.validation import TransactionValidator


class AppComponents:
    """
    Shared services plus factories for the screen state holders.

    Screens share the repository and the session but no mutable state;
    each call to a *_screen() method returns a fresh holder.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        session: UserSession,
        app_settings: AppSettings,
        audit_logger: AuditLogger,
    ):
        self.repository = repository
        self.session = session
        self.app_settings = app_settings
        self.audit_logger = audit_logger
        self.validator = TransactionValidator(app_settings.min_description_length)

    def dashboard_screen(self) -> DashboardStateHolder:
        return DashboardStateHolder(
            repository=self.repository,
            session=self.session,
            recent_limit=self.app_settings.recent_transactions_limit,
            audit_logger=self.audit_logger,
        )

    def reports_screen(self, time_range: TimeRange = TimeRange.MONTH) -> ReportsStateHolder:
        return ReportsStateHolder(
            repository=self.repository,
            session=self.session,
            time_range=time_range,
            audit_logger=self.audit_logger,
        )

    def transactions_screen(self) -> TransactionsStateHolder:
        return TransactionsStateHolder(
            repository=self.repository,
            session=self.session,
            validator=self.validator,
            audit_logger=self.audit_logger,
        )

    def settings_screen(self) -> SettingsStateHolder:
        return SettingsStateHolder(
            currency=self.app_settings.default_currency,
            available_currencies=self.app_settings.currencies_list,
            audit_logger=self.audit_logger,
        )


def create_store(app_settings: AppSettings) -> TransactionStoreInterface:
    """Build the configured store backend."""
    if app_settings.storage_backend == "google_sheets":
        return GoogleSheetsTransactionStore(GoogleSheetsClient())
    return InMemoryTransactionStore()


def create_app_components(
    store: Optional[TransactionStoreInterface] = None,
    app_settings: Optional[AppSettings] = None,
    owner_id: Optional[str] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        store: Store backend to use; built from settings if None
        app_settings: Overrides the cached settings (useful in tests)
        owner_id: Session owner; defaults to APP_DEFAULT_OWNER_ID

    Returns:
        AppComponents wired to one repository and one session
    """
    app_settings = app_settings or get_settings().app
    configure_logging(app_settings.log_level)
    audit_logger = AuditLogger()

    if store is None:
        try:
            store = create_store(app_settings)
        except Exception as e:
            # Storage not configured - continue with local memory
            audit_logger.log_error(
                "storage_not_configured",
                str(e),
                details={"backend": app_settings.storage_backend},
            )
            store = InMemoryTransactionStore()

    repository = TransactionRepository(
        store=store,
        audit_logger=audit_logger,
        swallow_list_errors=app_settings.swallow_list_errors,
    )
    session = UserSession(owner_id=owner_id or app_settings.default_owner_id)

    return AppComponents(
        repository=repository,
        session=session,
        app_settings=app_settings,
        audit_logger=audit_logger,
    )
