"""Dashboard screen state: totals, balance and recent transactions."""

from datetime import datetime
from typing import Callable, Optional

from src.audit import AuditLogger
from src.models.state import DashboardState
from src.models.transaction import TimeRange, UserSession, utc_now
from src.reports import build_dashboard_summary, window_bounds
from src.repository import TransactionRepository
from src.services.storage import StorageError
from src.state.store import ScreenStateHolder


class DashboardStateHolder(ScreenStateHolder[DashboardState]):
    """
    Loads the owner's transactions and derives the dashboard figures.

    Call start() once the screen is shown (or await refresh() directly).
    """

    screen_name = "dashboard"

    def __init__(
        self,
        repository: TransactionRepository,
        session: UserSession,
        recent_limit: int = 5,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(DashboardState(), audit_logger)
        self._repository = repository
        self._session = session
        self._recent_limit = recent_limit
        self._clock = clock

    def start(self):
        """Kick off the initial load as a task."""
        return self._launch(self.refresh())

    async def refresh(self) -> None:
        generation = self._begin_request()
        self._store.update(is_loading=True)

        try:
            transactions = await self._repository.get_transactions_for_owner(
                self._session.owner_id
            )
        except StorageError as e:
            if self._is_current(generation):
                self._store.update(
                    is_loading=False,
                    error=f"Failed to load dashboard data: {e}",
                )
            return

        if not self._is_current(generation):
            return

        summary = build_dashboard_summary(transactions, self._recent_limit)
        self._store.update(
            total_income=summary.total_income,
            total_expenses=summary.total_expenses,
            total_balance=summary.total_balance,
            recent_transactions=summary.recent_transactions,
            is_loading=False,
            error=None,
        )

    async def load_monthly_transactions(self) -> None:
        """Fetch the last calendar month of transactions for the owner."""
        generation = self._begin_request("monthly")
        start, end = window_bounds(TimeRange.MONTH, self._clock())

        try:
            transactions = await self._repository.get_transactions_in_range(
                self._session.owner_id, start, end
            )
        except StorageError as e:
            if self._is_current(generation, "monthly"):
                self._store.update(
                    error=f"Failed to load monthly transactions: {e}"
                )
            return

        if self._is_current(generation, "monthly"):
            self._store.update(monthly_transactions=transactions)

    def clear_error(self) -> None:
        self._store.update(error=None)
