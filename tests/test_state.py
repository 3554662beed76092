"""
Tests for the screen state holders.

Overlapping refreshes are simulated with a store whose owner query
parks on an asyncio.Event until the test releases it.
"""

import asyncio
import pytest
import pytest_asyncio
from datetime import date, datetime, timezone
from decimal import Decimal

from src.audit import AuditLogger
from src.models.audit import AuditEventType
from src.models.state import DashboardState
from src.models.transaction import (
    TimeRange,
    TransactionCategory,
    TransactionType,
    timestamp_for_date,
)
from src.orchestrator import create_app_components
from src.config.settings import AppSettings
from src.repository import TransactionRepository
from src.services.storage import InMemoryTransactionStore
from src.state import (
    DashboardStateHolder,
    ReportsStateHolder,
    SettingsStateHolder,
    StateStore,
    TransactionsStateHolder,
)
from src.state.settings import SIGN_OUT_UNAVAILABLE

from tests.conftest import NOW, make_transaction


class GatedStore(InMemoryTransactionStore):
    """Owner queries take their snapshot immediately but return only when released."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gates: list[asyncio.Event] = []

    async def query_by_owner(self, owner_id):
        result = await super().query_by_owner(owner_id)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return result


async def wait_for_gates(store: GatedStore, count: int) -> None:
    while len(store.gates) < count:
        await asyncio.sleep(0)


class TestStateStore:
    """Tests for the observable snapshot holder."""

    def test_subscribe_emits_current(self):
        store = StateStore(DashboardState())
        seen = []
        store.subscribe(seen.append)
        assert seen == [DashboardState()]

    def test_update_notifies_subscribers(self):
        store = StateStore(DashboardState())
        seen = []
        store.subscribe(seen.append, emit_current=False)
        store.update(is_loading=True)
        assert [s.is_loading for s in seen] == [True]
        assert store.value.is_loading is True

    def test_unsubscribe(self):
        store = StateStore(DashboardState())
        seen = []
        unsubscribe = store.subscribe(seen.append, emit_current=False)
        unsubscribe()
        store.update(is_loading=True)
        assert seen == []

    def test_failing_subscriber_does_not_block_others(self):
        store = StateStore(DashboardState())
        seen = []

        def broken(_):
            raise RuntimeError("boom")

        store.subscribe(broken, emit_current=False)
        store.subscribe(seen.append, emit_current=False)
        store.update(error="x")
        assert len(seen) == 1

    def test_closed_store_ignores_updates(self):
        store = StateStore(DashboardState())
        store.close()
        store.update(is_loading=True)
        assert store.value.is_loading is False


class TestDashboardStateHolder:
    """Tests for dashboard loading."""

    @pytest.mark.asyncio
    async def test_refresh_computes_figures(self, repository, store, session):
        await repository.add_transaction(make_transaction("100", TransactionType.INCOME, "Salary"))
        await repository.add_transaction(make_transaction("40", category="Food & Dining"))
        holder = DashboardStateHolder(repository, session)

        await holder.refresh()

        state = holder.state
        assert state.total_income == Decimal("100")
        assert state.total_expenses == Decimal("40")
        assert state.total_balance == Decimal("60")
        assert len(state.recent_transactions) == 2
        assert state.is_loading is False
        assert state.error is None

    @pytest.mark.asyncio
    async def test_recent_limit(self, repository, session):
        for i in range(7):
            await repository.add_transaction(make_transaction(str(i + 1), days_ago=i))
        holder = DashboardStateHolder(repository, session, recent_limit=5)

        await holder.refresh()

        assert [t.amount for t in holder.state.recent_transactions] == [
            Decimal(str(i)) for i in range(1, 6)
        ]

    @pytest.mark.asyncio
    async def test_refresh_error(self, repository, store, session):
        store.fail_on("query_by_owner")
        holder = DashboardStateHolder(repository, session)

        await holder.refresh()

        assert holder.state.error.startswith("Failed to load dashboard data:")
        assert holder.state.is_loading is False
        holder.clear_error()
        assert holder.state.error is None

    @pytest.mark.asyncio
    async def test_load_monthly_transactions(self, repository, session):
        await repository.add_transaction(make_transaction("1", days_ago=3))
        await repository.add_transaction(make_transaction("2", days_ago=40))
        holder = DashboardStateHolder(repository, session, clock=lambda: NOW)

        await holder.load_monthly_transactions()

        assert [t.amount for t in holder.state.monthly_transactions] == [Decimal("1")]

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, session):
        """When refreshes overlap, only the newest one is applied."""
        store = GatedStore([make_transaction("10", id="a")])
        audit_logger = AuditLogger()
        repository = TransactionRepository(store, audit_logger)
        holder = DashboardStateHolder(repository, session, audit_logger=audit_logger)

        first = asyncio.create_task(holder.refresh())
        await wait_for_gates(store, 1)
        await store.put(make_transaction("20", id="b"))
        second = asyncio.create_task(holder.refresh())
        await wait_for_gates(store, 2)

        store.gates[1].set()
        await second
        assert holder.state.total_expenses == Decimal("30")

        store.gates[0].set()
        await first
        assert holder.state.total_expenses == Decimal("30")
        assert any(
            e.event_type == AuditEventType.STALE_RESPONSE_DISCARDED
            for e in audit_logger.history
        )

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight_load(self, session):
        store = GatedStore([make_transaction("10", id="a")])
        holder = DashboardStateHolder(TransactionRepository(store), session)

        task = holder.start()
        await wait_for_gates(store, 1)
        await holder.close()

        assert task.cancelled()
        assert holder.closed is True
        assert holder.state.total_expenses == Decimal("0")

    @pytest.mark.asyncio
    async def test_late_response_after_close_is_ignored(self, session):
        store = GatedStore([make_transaction("10", id="a")])
        holder = DashboardStateHolder(TransactionRepository(store), session)
        seen = []
        holder.subscribe(seen.append, emit_current=False)

        task = asyncio.create_task(holder.refresh())
        await wait_for_gates(store, 1)
        await holder.close()
        count = len(seen)

        store.gates[0].set()
        await task

        assert len(seen) == count
        assert holder.state.total_expenses == Decimal("0")


class TestReportsStateHolder:
    """Tests for report windows and breakdowns."""

    @pytest_asyncio.fixture
    async def seeded(self, repository):
        await repository.add_transaction(make_transaction("100", TransactionType.INCOME, "Salary", days_ago=3))
        await repository.add_transaction(make_transaction("40", category="Food & Dining", days_ago=2))
        await repository.add_transaction(make_transaction("10", category="Food & Dining", days_ago=1))
        await repository.add_transaction(make_transaction("60", category="Shopping", days_ago=40))
        await repository.add_transaction(make_transaction("5", category="Shopping", days_ago=400))
        return repository

    @pytest.mark.asyncio
    async def test_month_window(self, seeded, session):
        holder = ReportsStateHolder(seeded, session, clock=lambda: NOW)

        await holder.refresh()

        state = holder.state
        assert state.total_income == Decimal("100")
        assert state.total_expenses == Decimal("50")
        assert state.net_savings == Decimal("50")
        assert state.savings_rate == 50.0
        assert [(c.category, c.amount, c.percentage) for c in state.expenses_by_category] == [
            ("Food & Dining", Decimal("50"), 100.0)
        ]

    @pytest.mark.asyncio
    async def test_select_time_range(self, seeded, session):
        holder = ReportsStateHolder(seeded, session, clock=lambda: NOW)

        await holder.select_time_range(TimeRange.YEAR)
        assert holder.state.selected_time_range == TimeRange.YEAR
        assert holder.state.total_expenses == Decimal("110")
        assert holder.state.expenses_by_category[0].category == "Shopping"

        await holder.select_time_range(TimeRange.ALL)
        assert holder.state.total_expenses == Decimal("115")

    @pytest.mark.asyncio
    async def test_week_window_without_income(self, repository, session):
        await repository.add_transaction(make_transaction("30", days_ago=2))
        holder = ReportsStateHolder(repository, session, TimeRange.WEEK, clock=lambda: NOW)

        await holder.refresh()

        assert holder.state.savings_rate == 0.0
        assert holder.state.income_by_category == []

    @pytest.mark.asyncio
    async def test_transaction_added_today_is_in_window(self, repository, session):
        """A form entry for today shows up in a report computed right after."""
        morning = datetime(2024, 3, 31, 8, 0, tzinfo=timezone.utc)
        await repository.add_transaction(
            make_transaction("7", days_ago=0).model_copy(
                update={"timestamp": timestamp_for_date(date(2024, 3, 31), morning)}
            )
        )
        holder = ReportsStateHolder(repository, session, TimeRange.WEEK, clock=lambda: morning)

        await holder.refresh()

        assert holder.state.total_expenses == Decimal("7")

    @pytest.mark.asyncio
    async def test_refresh_error(self, repository, store, session):
        store.fail_on("query_by_timestamp")
        holder = ReportsStateHolder(repository, session, clock=lambda: NOW)

        await holder.refresh()

        assert holder.state.error.startswith("Failed to load report data:")


class TestTransactionsStateHolder:
    """Tests for the transaction list and the add form."""

    @pytest.fixture
    def holder(self, repository, session, audit_logger):
        return TransactionsStateHolder(repository, session, audit_logger=audit_logger)

    def test_live_field_errors(self, holder):
        holder.on_amount_changed("abc")
        holder.on_description_changed("ab")
        form = holder.state.new_transaction
        assert form.amount_error == "Invalid amount"
        assert form.description_error == "Description must be at least 3 characters"

        holder.on_amount_changed("12")
        assert holder.state.new_transaction.amount_error is None

    @pytest.mark.asyncio
    async def test_save_transaction(self, holder, store, session):
        holder.open_add_form()
        holder.on_amount_changed("40.00")
        holder.on_description_changed("Groceries")
        holder.on_type_changed(TransactionType.EXPENSE)
        holder.on_category_changed(TransactionCategory.FOOD)
        holder.on_date_changed(NOW)

        stored = await holder.save_transaction()

        assert stored is not None
        assert stored.owner_id == session.owner_id
        assert stored.category == "Food & Dining"
        assert store.records[stored.id] == stored
        assert holder.state.transactions == [stored]
        assert holder.state.is_adding_transaction is False
        assert holder.state.new_transaction.amount == ""

    @pytest.mark.asyncio
    async def test_save_invalid_form(self, holder, store, audit_logger):
        holder.on_description_changed("Groceries")

        assert await holder.save_transaction() is None

        assert holder.state.new_transaction.amount_error == "Amount is required"
        assert store.records == {}
        assert audit_logger.history[-1].event_type == AuditEventType.VALIDATION_FAILED

    @pytest.mark.asyncio
    async def test_save_store_failure(self, holder, store):
        store.fail_on("put")
        holder.on_amount_changed("5")
        holder.on_description_changed("Coffee")

        assert await holder.save_transaction() is None

        assert holder.state.error.startswith("Failed to save transaction:")
        assert holder.state.new_transaction.amount == "5"

    @pytest.mark.asyncio
    async def test_save_error_survives_reload(self, holder, store):
        store.fail_on("put")
        holder.on_amount_changed("5")
        holder.on_description_changed("Coffee")
        await holder.save_transaction()

        await holder.refresh()

        assert holder.state.error == "Failed to save transaction: put unavailable"

    @pytest.mark.asyncio
    async def test_delete_error_survives_reload(self, holder, store):
        store.fail_on("remove")
        await holder.delete_transaction("k1")

        await holder.refresh()

        assert holder.state.error == "Failed to delete transaction: remove unavailable"

    @pytest.mark.asyncio
    async def test_reload_clears_its_own_error(self, holder, store):
        store.fail_on("query_by_owner")
        await holder.refresh()
        assert holder.state.error == "Failed to load transactions: query_by_owner unavailable"

        store.clear_failures()
        await holder.refresh()

        assert holder.state.error is None

    @pytest.mark.asyncio
    async def test_save_rejects_too_long_description(self, holder, store):
        holder.on_amount_changed("12.50")
        holder.on_description_changed("x" * 501)
        assert holder.state.new_transaction.description_error == "Description must be at most 500 characters"

        assert await holder.save_transaction() is None
        assert store.records == {}

    @pytest.mark.asyncio
    async def test_save_rejects_blank_description(self, holder, store):
        holder.on_amount_changed("12.50")
        holder.on_description_changed("   ")
        assert holder.state.new_transaction.description_error == "Description is required"

        assert await holder.save_transaction() is None
        assert store.records == {}

    @pytest.mark.asyncio
    async def test_refresh_newest_first(self, holder, repository):
        await repository.add_transaction(make_transaction("1", days_ago=5))
        await repository.add_transaction(make_transaction("2", days_ago=1))

        await holder.refresh()

        assert [t.amount for t in holder.state.transactions] == [Decimal("2"), Decimal("1")]

    @pytest.mark.asyncio
    async def test_delete_transaction(self, holder, repository, store):
        stored = await repository.add_transaction(make_transaction("1"))
        await holder.refresh()

        assert await holder.delete_transaction(stored.id) is True

        assert store.records == {}
        assert holder.state.transactions == []

    @pytest.mark.asyncio
    async def test_delete_failure(self, holder, store):
        store.fail_on("remove")

        assert await holder.delete_transaction("k1") is False
        assert holder.state.error.startswith("Failed to delete transaction:")

    def test_dismiss_add_form(self, holder):
        holder.open_add_form()
        holder.on_amount_changed("9")
        holder.dismiss_add_form()
        assert holder.state.is_adding_transaction is False
        assert holder.state.new_transaction.amount == ""


class TestSettingsStateHolder:
    """Tests for in-memory preferences."""

    def test_toggles(self):
        holder = SettingsStateHolder()
        holder.toggle_dark_mode()
        holder.toggle_notifications()
        assert holder.state.is_dark_mode is True
        assert holder.state.notifications_enabled is False

    def test_set_currency(self):
        holder = SettingsStateHolder()
        holder.show_currency_dialog()
        holder.set_currency("EUR")
        assert holder.state.currency == "EUR"
        assert holder.state.show_currency_dialog is False

    def test_unsupported_currency(self):
        holder = SettingsStateHolder(available_currencies=["USD", "EUR"])
        holder.set_currency("GBP")
        assert holder.state.currency == "USD"
        assert holder.state.error == "Unsupported currency: GBP"

    def test_sign_out_is_unavailable(self):
        holder = SettingsStateHolder()
        holder.sign_out()
        assert holder.state.error == SIGN_OUT_UNAVAILABLE
        holder.clear_error()
        assert holder.state.error is None


class TestAppComponents:
    """Tests for wiring the screens together."""

    @pytest.mark.asyncio
    async def test_screens_share_repository(self):
        components = create_app_components(
            store=InMemoryTransactionStore(),
            app_settings=AppSettings(),
            owner_id="owner-1",
        )
        transactions = components.transactions_screen()
        dashboard = components.dashboard_screen()

        transactions.on_amount_changed("25")
        transactions.on_description_changed("Books")
        await transactions.save_transaction()
        await dashboard.refresh()

        assert components.session.owner_id == "owner-1"
        assert dashboard.state.total_expenses == Decimal("25")

    def test_settings_screen_uses_configured_currency(self):
        components = create_app_components(
            store=InMemoryTransactionStore(),
            app_settings=AppSettings(default_currency="EUR"),
        )
        assert components.settings_screen().state.currency == "EUR"
