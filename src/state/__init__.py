"""Per-screen observable state holders."""

from src.state.store import ScreenStateHolder, StateStore
from src.state.dashboard import DashboardStateHolder
from src.state.reports import ReportsStateHolder
from src.state.settings import SettingsStateHolder
from src.state.transactions import TransactionsStateHolder

__all__ = [
    "DashboardStateHolder",
    "ReportsStateHolder",
    "ScreenStateHolder",
    "SettingsStateHolder",
    "StateStore",
    "TransactionsStateHolder",
]
