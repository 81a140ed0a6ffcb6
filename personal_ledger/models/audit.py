"""
Audit Models for the Personal Ledger

Every change to the ledger, and every load or save problem, produces one
audit event. This provides:
1. A readable history of what happened to the ledger file
2. Debugging information when a save fails
3. A visible trace when a corrupt file forced an empty start

DESIGN DECISION: Audit events are written to the structured log only.
They are never stored inside the ledger file itself.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from personal_ledger.models.entry import Entry, LoadResult


DESCRIPTION_MAX_LENGTH = 500


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Startup
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"

    # Mutations
    ENTRY_ADDED = "entry_added"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"

    # Persistence
    SAVE_FAILED = "save_failed"

    # Queries
    QUERY_EXECUTED = "query_executed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
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

    # Context - which entry is this about?
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entry this event relates to"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    @field_validator('description', mode='before')
    @classmethod
    def clip_description(cls, v: Any) -> Any:
        """Clip overlong descriptions rather than rejecting the event."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[:DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added(entry)
        event = AuditEventBuilder.save_failed("add", str(error))
    """

    @staticmethod
    def ledger_loaded(result: LoadResult, path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description=f"Ledger loaded ({result.status.value}) with {result.entry_count} entries",
            details={
                "path": path,
                "status": result.status.value,
                "entry_count": result.entry_count,
            },
        )

    @staticmethod
    def ledger_load_failed(result: LoadResult, path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description="Ledger file unreadable; starting with an empty ledger",
            details={
                "path": path,
                "backup_path": result.backup_path,
            },
            error_message=result.error,
        )

    @staticmethod
    def entry_added(entry: Entry) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_id=entry.id,
            description=f"Entry added: {entry.kind.value} {entry.amount}",
            details={
                "kind": entry.kind.value,
                "amount": str(entry.amount),
                "category": entry.category,
                "date": entry.entry_date.isoformat(),
            },
        )

    @staticmethod
    def entry_updated(old_entry: Entry, new_entry: Entry, position: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_UPDATED,
            entity_id=old_entry.id,
            description=f"Entry updated at position {position}",
            details={
                "position": position,
                "new_id": str(new_entry.id),
                "old_amount": str(old_entry.amount),
                "new_amount": str(new_entry.amount),
            },
        )

    @staticmethod
    def entry_deleted(entry: Entry, position: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_id=entry.id,
            description=f"Entry deleted from position {position}",
            details={
                "position": position,
                "kind": entry.kind.value,
                "amount": str(entry.amount),
            },
        )

    @staticmethod
    def save_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Ledger save failed after {operation}",
            details={
                "operation": operation,
            },
            error_message=error_message,
        )

    @staticmethod
    def query_executed(description: str, result_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            severity=AuditSeverity.DEBUG,
            description=f"Query executed: returned {result_count} results",
            details={
                "query": description,
                "result_count": result_count,
            },
        )
