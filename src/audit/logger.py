"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every add and delete
2. Debugging capability when the remote store misbehaves
3. A record of which errors the user was shown

The audit logger:
- Writes structured JSON lines through structlog
- Never raises; a logging failure must not break a screen
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Called once at startup by the component factory.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log. The most recent
    events are also kept in memory so the UI and tests can inspect them.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("finance.audit")
        self._history_size = history_size
        self._history: list[AuditEvent] = []

    @property
    def history(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event. Never raises."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        try:
            log_dict = event.to_log_dict()
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Fall back to stderr; audit logging must not break the main flow
            print(f"WARNING: Failed to write audit event: {e}", file=sys.stderr)

    def log_transaction_added(
        self,
        transaction_id: str,
        owner_id: str,
        amount: str,
        transaction_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            owner_id=owner_id,
            amount=amount,
            transaction_type=transaction_type,
            correlation_id=correlation_id,
        ))

    def log_transaction_updated(
        self,
        transaction_id: str,
        owner_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_transaction_not_found(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_not_found(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_transactions_fetched(
        self,
        owner_id: str,
        query: str,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transactions_fetched(
            owner_id=owner_id,
            query=query,
            result_count=result_count,
            correlation_id=correlation_id,
        ))

    def log_stale_response(
        self,
        screen: str,
        generation: int,
        current_generation: int,
    ) -> None:
        self.log(AuditEventBuilder.stale_response_discarded(
            screen=screen,
            generation=generation,
            current_generation=current_generation,
        ))

    def log_validation_failed(
        self,
        issues: list[dict],
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    def log_settings_changed(self, setting: str, value: Any) -> None:
        self.log(AuditEventBuilder.settings_changed(setting=setting, value=value))

    def log_store_error(
        self,
        operation: str,
        error_message: str,
        owner_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.store_error(
            operation=operation,
            error_message=error_message,
            owner_id=owner_id,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., saving a transaction).
    Pass it through all subsequent operations.
    """
    return uuid4()
