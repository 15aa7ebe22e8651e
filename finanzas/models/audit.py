"""
Audit Models for Finanzas

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every mutation, import and export
2. Debugging information when local data turns out to be corrupt
3. Ability to reconstruct what happened to the store in a session

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the store lifecycle has its own event type.
    """
    # Store lifecycle
    STORE_LOADED = "store_loaded"
    STORE_LOAD_FAILED = "store_load_failed"
    RECORD_SKIPPED = "record_skipped"
    SAVE_FAILED = "save_failed"

    # Mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    VALIDATION_FAILED = "validation_failed"

    # Backups
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_IMPORTED = "backup_imported"
    BACKUP_REJECTED = "backup_rejected"

    # Reporting
    REPORT_GENERATED = "report_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which transaction is this about?
    transaction_id: Optional[int] = Field(
        default=None,
        description="Id of the transaction this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", "25000")
        event = AuditEventBuilder.save_failed("disk full")
    """

    @staticmethod
    def store_loaded(count: int, skipped: int = 0) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            description=f"Store loaded with {count} transactions",
            details={
                "transaction_count": count,
                "skipped_records": skipped,
            },
        )

    @staticmethod
    def store_load_failed(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description="Persisted data unreadable, starting with an empty store",
            error_message=reason,
        )

    @staticmethod
    def record_skipped(index: int, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            description=f"Skipped malformed record at position {index}",
            details={"index": index},
            error_message=reason,
        )

    @staticmethod
    def save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Could not persist the transaction store",
            error_message=error_message,
        )

    @staticmethod
    def transaction_added(
        transaction_id: int,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            transaction_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: int,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            transaction_id=transaction_id,
            description=f"Transaction updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: int, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            transaction_id=transaction_id,
            description=(
                "Transaction deleted" if existed
                else "Delete requested for unknown transaction"
            ),
            details={"existed": existed},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Transaction input rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def backup_exported(filename: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            description=f"Backup exported: {filename}",
            details={
                "filename": filename,
                "transaction_count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_imported(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_IMPORTED,
            severity=AuditSeverity.WARNING,
            description=f"Store replaced from backup with {count} transactions",
            details={"transaction_count": count},
            is_user_action=True,
        )

    @staticmethod
    def backup_rejected(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Backup file rejected, store left untouched",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def report_generated(month_key: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            description=f"Monthly report generated for {month_key}",
            details={
                "month": month_key,
                "transaction_count": count,
            },
        )
