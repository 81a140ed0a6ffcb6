"""
Data Models Package

This package contains all Pydantic models used by the Personal Ledger.
Everything the store holds or reports conforms to these schemas.
"""

from personal_ledger.models.entry import (
    DEFAULT_CATEGORIES,
    Entry,
    EntryKind,
    LoadResult,
    LoadStatus,
)
from personal_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORIES",
    "Entry",
    "EntryKind",
    "LoadResult",
    "LoadStatus",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
