"""
Data Models Package

This package contains all Pydantic models used in Finanzas.
All data flowing through the system must conform to these schemas.
"""

from finanzas.models.transaction import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    Category,
    Transaction,
    TransactionDocument,
    TransactionType,
    category_label,
    month_label,
)
from finanzas.models.report import (
    Advice,
    DateRange,
    MonthlyReport,
    MonthRef,
    MonthView,
    PeriodSummary,
    RangeKind,
    ReportChoice,
    Suggestion,
    Totals,
)
from finanzas.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "Category",
    "Transaction",
    "TransactionDocument",
    "TransactionType",
    "category_label",
    "month_label",
    # Query and report models
    "Advice",
    "DateRange",
    "MonthlyReport",
    "MonthRef",
    "MonthView",
    "PeriodSummary",
    "RangeKind",
    "ReportChoice",
    "Suggestion",
    "Totals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
