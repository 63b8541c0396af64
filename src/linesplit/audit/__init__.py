"""Audit — streaming diff, event models, log parsing."""

from linesplit.audit.auditor import AuditError, DiffAuditor, audit, format_event
from linesplit.audit.log_parser import (
    AuditLogParser,
    LogCorruption,
    LoggedEvent,
    LogSummary,
    summarize_log,
)
from linesplit.audit.models import AuditEvent, AuditOutcome, AuditResult

__all__ = [
    "AuditError",
    "AuditEvent",
    "AuditLogParser",
    "AuditOutcome",
    "AuditResult",
    "DiffAuditor",
    "LogCorruption",
    "LogSummary",
    "LoggedEvent",
    "audit",
    "format_event",
    "summarize_log",
]
