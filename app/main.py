"""
Streamlit Frontend for GenZ Finance Manager

Four pages, each backed by one state holder:
1. Dashboard - balance, income, expenses, recent transactions
2. Transactions - list, add, delete
3. Reports - totals and category breakdowns for a time window
4. Settings - dark mode, notifications, currency

The page code only renders snapshots and forwards user actions.
All figures come from the state holders.
"""

import asyncio
from datetime import datetime, timezone

import streamlit as st

from src.models.transaction import (
    TimeRange,
    TransactionCategory,
    TransactionType,
    timestamp_for_date,
)
from src.orchestrator import AppComponents, create_app_components


# Page configuration
st.set_page_config(
    page_title="GenZ Finance Manager",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def get_holder(key: str, factory):
    """One state holder per browser session and page."""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def format_money(amount, currency: str) -> str:
    return f"{currency} {amount:,.2f}"


def main():
    """Main application entry point."""
    components = get_components()
    settings_holder = get_holder("settings_holder", components.settings_screen)
    currency = settings_holder.state.currency

    st.sidebar.title("💸 GenZ Finance")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "📒 Transactions", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(components, currency)
    elif page == "📒 Transactions":
        render_transactions_page(components, currency)
    elif page == "📊 Reports":
        render_reports_page(components, currency)
    elif page == "⚙️ Settings":
        render_settings_page(settings_holder)


def render_dashboard_page(components: AppComponents, currency: str):
    """Render the dashboard page."""
    st.title("🏠 Dashboard")
    holder = get_holder("dashboard_holder", components.dashboard_screen)

    with st.spinner("Loading..."):
        run_async(holder.refresh())
    state = holder.state

    if state.error:
        st.error(state.error)

    col1, col2, col3 = st.columns(3)
    col1.metric("Balance", format_money(state.total_balance, currency))
    col2.metric("Income", format_money(state.total_income, currency))
    col3.metric("Expenses", format_money(state.total_expenses, currency))

    st.markdown("### Recent Transactions")
    if not state.recent_transactions:
        st.info("No transactions yet. Add one on the Transactions page.")
    for tx in state.recent_transactions:
        sign = "+" if tx.type == TransactionType.INCOME else "-"
        st.markdown(
            f"**{tx.description}** · {tx.category} · "
            f"{tx.timestamp.strftime('%d %b %Y')} · {sign}{format_money(tx.amount, currency)}"
        )


def render_transactions_page(components: AppComponents, currency: str):
    """Render the transaction list and the add form."""
    st.title("📒 Transactions")
    holder = get_holder("transactions_holder", components.transactions_screen)

    with st.form("add_transaction", clear_on_submit=False):
        st.markdown("### Add Transaction")
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount *", value=holder.state.new_transaction.amount)
            tx_type = st.selectbox(
                "Type",
                options=list(TransactionType),
                format_func=lambda t: t.value.title(),
            )
        with col2:
            description = st.text_input(
                "Description *",
                value=holder.state.new_transaction.description,
            )
            category = st.selectbox(
                "Category",
                options=list(TransactionCategory),
                format_func=lambda c: c.display_name,
            )
        tx_date = st.date_input("Date", value=datetime.now(timezone.utc).date())

        if st.form_submit_button("💾 Save", type="primary"):
            holder.open_add_form()
            holder.on_amount_changed(amount)
            holder.on_description_changed(description)
            holder.on_type_changed(tx_type)
            holder.on_category_changed(category)
            holder.on_date_changed(timestamp_for_date(tx_date))
            saved = run_async(holder.save_transaction())
            if saved:
                st.success("Transaction saved")

    form = holder.state.new_transaction
    if form.amount_error:
        st.warning(form.amount_error)
    if form.description_error:
        st.warning(form.description_error)

    with st.spinner("Loading..."):
        run_async(holder.refresh())
    state = holder.state

    if state.error:
        st.error(state.error)
        if st.button("Dismiss"):
            holder.clear_error()
            st.rerun()

    st.markdown("---")
    st.markdown("### All Transactions")
    if not state.transactions:
        st.info("No transactions yet.")
    for tx in state.transactions:
        col1, col2 = st.columns([5, 1])
        sign = "+" if tx.type == TransactionType.INCOME else "-"
        col1.markdown(
            f"**{tx.description}** · {tx.category} · "
            f"{tx.timestamp.strftime('%d %b %Y')} · {sign}{format_money(tx.amount, currency)}"
        )
        if col2.button("🗑️", key=f"delete_{tx.id}"):
            run_async(holder.delete_transaction(tx.id))
            st.rerun()


def render_reports_page(components: AppComponents, currency: str):
    """Render the reports page."""
    st.title("📊 Reports")
    holder = get_holder("reports_holder", components.reports_screen)

    time_range = st.radio(
        "Time range",
        options=list(TimeRange),
        index=list(TimeRange).index(holder.state.selected_time_range),
        format_func=lambda r: r.value.title(),
        horizontal=True,
    )

    with st.spinner("Loading..."):
        run_async(holder.select_time_range(time_range))
    state = holder.state

    if state.error:
        st.error(state.error)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income", format_money(state.total_income, currency))
    col2.metric("Expenses", format_money(state.total_expenses, currency))
    col3.metric("Net Savings", format_money(state.net_savings, currency))
    col4.metric("Savings Rate", f"{state.savings_rate:.1f}%")

    for title, totals in (
        ("Expenses by Category", state.expenses_by_category),
        ("Income by Category", state.income_by_category),
    ):
        st.markdown(f"### {title}")
        if not totals:
            st.info("Nothing in this period.")
            continue
        for ct in totals:
            st.markdown(
                f"**{ct.category}** · {format_money(ct.amount, currency)} · {ct.percentage:.1f}%"
            )
            st.progress(min(ct.percentage / 100, 1.0))


def render_settings_page(holder):
    """Render the settings page."""
    st.title("⚙️ Settings")
    state = holder.state

    if state.error:
        st.error(state.error)
        if st.button("Dismiss"):
            holder.clear_error()
            st.rerun()

    if st.toggle("Dark mode", value=state.is_dark_mode) != state.is_dark_mode:
        holder.toggle_dark_mode()
        st.rerun()

    if st.toggle("Notifications", value=state.notifications_enabled) != state.notifications_enabled:
        holder.toggle_notifications()
        st.rerun()

    currency = st.selectbox(
        "Currency",
        options=state.available_currencies,
        index=state.available_currencies.index(state.currency),
    )
    if currency != state.currency:
        holder.set_currency(currency)
        st.rerun()

    st.markdown("---")
    if st.button("Sign out"):
        holder.sign_out()
        st.rerun()

    st.markdown("### Connection Status")
    from src.config import validate_all_settings

    status = validate_all_settings()
    if status.get("google_sheets", False):
        st.success("✅ Google Sheets (Storage) - Configured")
    else:
        error = status.get("google_sheets_error", "Not configured")
        st.warning(f"Google Sheets (Storage) - {error}. Using in-memory storage.")


if __name__ == "__main__":
    main()
