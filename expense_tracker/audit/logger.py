"""
Audit Logger

DESIGN DECISION: Every mutation of the expense store is logged.
This provides:
1. Traceability of what changed and when
2. Debugging capability when storage and memory diverge
3. A visible record of persistence failures, which are otherwise silent

The audit logger:
- Is synchronous (the whole engine is)
- Gracefully handles failures (never crashes the app if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

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
        if json_logs
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

    Writes every event to the structured local log. Keeps the most recent
    events in memory so callers (and tests) can inspect what happened.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._history_size = history_size
        self._history: list[AuditEvent] = []

    @property
    def history(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log call itself failed.
        """
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # never propagate into the caller
            return False
        return True

    def log_persistence_failure(
        self,
        key: str,
        operation: str,
        error: Exception,
    ) -> None:
        """Log a storage read/write failure."""
        self.log(AuditEventBuilder.persistence_failed(
            key=key,
            operation=operation,
            error_message=str(error),
        ))

    def log_validation_failure(
        self,
        operation: str,
        issues: list[dict],
        expense_id: Optional[str] = None,
    ) -> None:
        """Log a rejected create/update."""
        self.log(AuditEventBuilder.validation_failed(
            operation=operation,
            issues=issues,
            expense_id=expense_id,
        ))
