"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Traceability of what was added, changed and removed
2. Debugging capability when a save fails
3. A visible record when a corrupt file was discarded at startup

The audit logger:
- Writes structured events through structlog
- Maps event severity onto the log level
- Never raises into the store; it only reports
"""

import logging
import sys
from typing import Callable, Optional

import structlog

from personal_ledger.config import LedgerSettings, get_settings
from personal_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from personal_ledger.models.entry import Entry, LoadResult


_CONFIGURED = False


def configure_logging(settings: Optional[LedgerSettings] = None) -> None:
    """
    Configure structlog and the stdlib root logger once per process.

    Later calls are no-ops so reloading modules does not stack handlers.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = settings or get_settings()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
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
        cache_logger_on_first_use=False,
    )
    _CONFIGURED = True


def get_logger(name: Optional[str] = None):
    """Return a structlog logger, configuring logging on first use."""
    configure_logging()
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service for the ledger store.
    """

    def __init__(self, logger=None):
        """
        Initialize audit logger.

        Args:
            logger: structlog logger to write to.
                    If None, a module logger is created.
        """
        self._logger = logger or get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Write one audit event at the level matching its severity.

        Returns True if the event was written. A failure is reported as an
        audit_log_failed error and never raised to the caller.
        """
        try:
            log_dict = event.to_log_dict()
            # "event" is structlog's own key for the message
            log_dict.pop("event_type")

            if event.severity == AuditSeverity.ERROR:
                self._logger.error(event.event_type.value, **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning(event.event_type.value, **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug(event.event_type.value, **log_dict)
            else:
                self._logger.info(event.event_type.value, **log_dict)
        except Exception as e:
            self._report_failure(event.event_type.value, e)
            return False
        return True

    def _build_and_log(self, builder: Callable[..., AuditEvent], *args) -> bool:
        """Build an event and log it; building errors are reported, not raised."""
        try:
            event = builder(*args)
        except Exception as e:
            self._report_failure(getattr(builder, "__name__", repr(builder)), e)
            return False
        return self.log(event)

    def _report_failure(self, event_name: str, error: Exception) -> None:
        # Log failure but don't raise
        try:
            self._logger.error(
                "audit_log_failed",
                audit_event=event_name,
                error=str(error),
                error_type=type(error).__name__,
            )
        except Exception:
            pass

    def log_load(self, result: LoadResult, path: str) -> None:
        """Log the outcome of the startup load."""
        if result.data_lost:
            self._build_and_log(AuditEventBuilder.ledger_load_failed, result, path)
        else:
            self._build_and_log(AuditEventBuilder.ledger_loaded, result, path)

    def log_entry_added(self, entry: Entry) -> None:
        """Log an appended entry."""
        self._build_and_log(AuditEventBuilder.entry_added, entry)

    def log_entry_updated(self, old_entry: Entry, new_entry: Entry, position: int) -> None:
        """Log an entry replaced in place."""
        self._build_and_log(AuditEventBuilder.entry_updated, old_entry, new_entry, position)

    def log_entry_deleted(self, entry: Entry, position: int) -> None:
        """Log a removed entry."""
        self._build_and_log(AuditEventBuilder.entry_deleted, entry, position)

    def log_save_failed(self, operation: str, error_message: str) -> None:
        """Log a save that could not be completed."""
        self._build_and_log(AuditEventBuilder.save_failed, operation, error_message)

    def log_query_executed(self, description: str, result_count: int) -> None:
        """Log a search over the ledger."""
        self._build_and_log(AuditEventBuilder.query_executed, description, result_count)
