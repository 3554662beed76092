"""Settings screen state. Preferences live in memory for the session only."""

from typing import Optional

from src.audit import AuditLogger
from src.models.state import SettingsState
from src.state.store import ScreenStateHolder


SIGN_OUT_UNAVAILABLE = "Sign out is not available until authentication is implemented"


class SettingsStateHolder(ScreenStateHolder[SettingsState]):
    """Dark mode, notifications and display currency."""

    screen_name = "settings"

    def __init__(
        self,
        currency: str = "USD",
        available_currencies: Optional[list[str]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        initial = SettingsState(currency=currency)
        if available_currencies:
            initial = initial.model_copy(
                update={"available_currencies": list(available_currencies)}
            )
        super().__init__(initial, audit_logger)

    def toggle_dark_mode(self) -> None:
        value = not self.state.is_dark_mode
        self._store.update(is_dark_mode=value)
        self._audit_logger.log_settings_changed("dark_mode", value)

    def toggle_notifications(self) -> None:
        value = not self.state.notifications_enabled
        self._store.update(notifications_enabled=value)
        self._audit_logger.log_settings_changed("notifications", value)

    def show_currency_dialog(self) -> None:
        self._store.update(show_currency_dialog=True)

    def hide_currency_dialog(self) -> None:
        self._store.update(show_currency_dialog=False)

    def set_currency(self, currency: str) -> None:
        """Select a display currency. Amounts are not converted."""
        if currency not in self.state.available_currencies:
            self._store.update(error=f"Unsupported currency: {currency}")
            return
        self._store.update(currency=currency, show_currency_dialog=False)
        self._audit_logger.log_settings_changed("currency", currency)

    def sign_out(self) -> None:
        # No auth backend yet
        self._store.update(error=SIGN_OUT_UNAVAILABLE)

    def clear_error(self) -> None:
        self._store.update(error=None)
