"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Complete traceability of store mutations
2. Debugging capability when local data is corrupt
3. A short in-session history the user can inspect

The audit logger:
- Is synchronous, like every other core operation
- Keeps a bounded list of recent events in memory
"""

import logging
import sys
from collections import deque

import structlog

from finanzas.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of the standard library.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and remembers the most
    recent ones for display.
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("finanzas.audit")
        self._recent: deque[AuditEvent] = deque(maxlen=history_size)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its own severity."""
        self._recent.append(event)
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._recent)
        events.reverse()
        return events[:limit]

    def log_store_loaded(self, count: int, skipped: int = 0) -> None:
        self.log(AuditEventBuilder.store_loaded(count, skipped))

    def log_store_load_failed(self, reason: str) -> None:
        self.log(AuditEventBuilder.store_load_failed(reason))

    def log_record_skipped(self, index: int, reason: str) -> None:
        self.log(AuditEventBuilder.record_skipped(index, reason))

    def log_save_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(error_message))

    def log_transaction_added(
        self,
        transaction_id: int,
        transaction_type: str,
        amount: str,
    ) -> None:
        """Log a new transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_updated(self, transaction_id: int, fields: list[str]) -> None:
        self.log(AuditEventBuilder.transaction_updated(transaction_id, fields))

    def log_transaction_deleted(self, transaction_id: int, existed: bool) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id, existed))

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues))

    def log_backup_exported(self, filename: str, count: int) -> None:
        self.log(AuditEventBuilder.backup_exported(filename, count))

    def log_backup_imported(self, count: int) -> None:
        self.log(AuditEventBuilder.backup_imported(count))

    def log_backup_rejected(self, error_message: str) -> None:
        self.log(AuditEventBuilder.backup_rejected(error_message))

    def log_report_generated(self, month_key: str, count: int) -> None:
        self.log(AuditEventBuilder.report_generated(month_key, count))
