"""
Activity Logger

DESIGN DECISION: Every state change and every rejected operation is logged.
This provides:
1. Traceability of what the user did in a session
2. Debugging capability when imports or saves fail

The activity logger:
- Writes to the local structured log only. Nothing is persisted.
- Never raises into the caller. A failed log line must not undo a save.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from finance_tracker.config.settings import AppSettings, get_settings
from finance_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog for local logging.

    Call once at startup. JSON lines by default; a readable console
    renderer when log_json is off.
    """
    settings = settings or get_settings()

    level = "DEBUG" if settings.debug_mode else settings.log_level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
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
        cache_logger_on_first_use=True,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Keeps the most recent events in memory (see `recent`) so the page
    can show what just happened.
    """

    def __init__(self, history_size: int = 50):
        self._logger = structlog.get_logger("finance_tracker.activity")
        self._history_size = history_size
        self._recent: list[ActivityEvent] = []

    @property
    def recent(self) -> list[ActivityEvent]:
        """Latest events, newest last."""
        return list(self._recent)

    def log(self, event: ActivityEvent) -> None:
        """Write an event to the local log."""
        self._recent.append(event)
        del self._recent[:-self._history_size]

        log_dict = event.to_log_dict()
        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_record_added(self, record_id: str, description: str, amount: Any) -> None:
        self.log(ActivityEventBuilder.record_added(record_id, description, str(amount)))

    def log_record_updated(self, record_id: str, fields: list[str]) -> None:
        self.log(ActivityEventBuilder.record_updated(record_id, fields))

    def log_record_deleted(self, record_id: str) -> None:
        self.log(ActivityEventBuilder.record_deleted(record_id))

    def log_record_not_found(self, record_id: str, operation: str) -> None:
        self.log(ActivityEventBuilder.record_not_found(record_id, operation))

    def log_validation_failed(self, errors: dict[str, str]) -> None:
        self.log(ActivityEventBuilder.validation_failed(errors))

    def log_edit_started(self, record_id: str) -> None:
        self.log(ActivityEventBuilder.edit_started(record_id))

    def log_edit_cancelled(self, record_id: Optional[str]) -> None:
        self.log(ActivityEventBuilder.edit_cancelled(record_id))

    def log_import_completed(self, record_count: int, settings_merged: bool) -> None:
        self.log(ActivityEventBuilder.import_completed(record_count, settings_merged))

    def log_import_rejected(self, reason: str, invalid_count: int) -> None:
        self.log(ActivityEventBuilder.import_rejected(reason, invalid_count))

    def log_export_created(self, record_count: int) -> None:
        self.log(ActivityEventBuilder.export_created(record_count))

    def log_settings_changed(self, changes: dict[str, Any]) -> None:
        self.log(ActivityEventBuilder.settings_changed(changes))

    def log_settings_rejected(self, field: str, value: Any) -> None:
        self.log(ActivityEventBuilder.settings_rejected(field, value))

    def log_state_loaded(self, record_count: int) -> None:
        self.log(ActivityEventBuilder.state_loaded(record_count))

    def log_storage_corrupted(self, reason: str) -> None:
        self.log(ActivityEventBuilder.storage_corrupted(reason))

    def log_storage_save_failed(self, reason: Optional[str]) -> None:
        self.log(ActivityEventBuilder.storage_save_failed(reason))
