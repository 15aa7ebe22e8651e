"""Audit logging package."""

from finanzas.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
