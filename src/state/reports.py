"""Reports screen state: figures and category breakdowns for a time window."""

from datetime import datetime
from typing import Callable, Optional

from src.audit import AuditLogger
from src.models.state import ReportsState
from src.models.transaction import TimeRange, UserSession, utc_now
from src.reports import build_report_summary, window_bounds
from src.repository import TransactionRepository
from src.services.storage import StorageError
from src.state.store import ScreenStateHolder


class ReportsStateHolder(ScreenStateHolder[ReportsState]):
    """
    Loads the owner's transactions inside the selected window and
    derives totals, savings rate and per-category breakdowns.
    """

    screen_name = "reports"

    def __init__(
        self,
        repository: TransactionRepository,
        session: UserSession,
        time_range: TimeRange = TimeRange.MONTH,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(ReportsState(selected_time_range=time_range), audit_logger)
        self._repository = repository
        self._session = session
        self._clock = clock

    def start(self):
        return self._launch(self.refresh())

    async def select_time_range(self, time_range: TimeRange) -> None:
        """Switch the window and reload."""
        self._store.update(selected_time_range=time_range)
        await self.refresh()

    async def refresh(self) -> None:
        generation = self._begin_request()
        time_range = self.state.selected_time_range
        self._store.update(is_loading=True)

        start, end = window_bounds(time_range, self._clock())
        try:
            transactions = await self._repository.get_transactions_in_range(
                self._session.owner_id, start, end
            )
        except StorageError as e:
            if self._is_current(generation):
                self._store.update(
                    is_loading=False,
                    error=f"Failed to load report data: {e}",
                )
            return

        if not self._is_current(generation):
            return

        summary = build_report_summary(transactions)
        self._store.update(
            is_loading=False,
            total_income=summary.total_income,
            total_expenses=summary.total_expenses,
            net_savings=summary.net_savings,
            savings_rate=summary.savings_rate,
            expenses_by_category=summary.expenses_by_category,
            income_by_category=summary.income_by_category,
            transactions=summary.transactions,
            error=None,
        )

    def clear_error(self) -> None:
        self._store.update(error=None)
