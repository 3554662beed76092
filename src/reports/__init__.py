"""Transaction aggregation and reporting windows."""

from src.reports.aggregation import (
    build_dashboard_summary,
    build_report_summary,
    category_totals,
    filter_by_date_range,
    filter_by_owner,
    net_balance,
    recent_transactions,
    savings_rate,
    sort_newest_first,
    sum_by_type,
)
from src.reports.windows import start_of_window, window_bounds

__all__ = [
    "build_dashboard_summary",
    "build_report_summary",
    "category_totals",
    "filter_by_date_range",
    "filter_by_owner",
    "net_balance",
    "recent_transactions",
    "savings_rate",
    "sort_newest_first",
    "start_of_window",
    "sum_by_type",
    "window_bounds",
]
