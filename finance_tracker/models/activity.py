"""
Activity Models for Finance Tracker

Every state change and every rejected operation is described by an
ActivityEvent and written to the local structured log.

Events are NOT persisted anywhere else. The tracker keeps no history
of past states.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Records
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORD_NOT_FOUND = "record_not_found"

    # Form handling
    VALIDATION_FAILED = "validation_failed"
    EDIT_STARTED = "edit_started"
    EDIT_CANCELLED = "edit_cancelled"

    # Import / export
    IMPORT_COMPLETED = "import_completed"
    IMPORT_REJECTED = "import_rejected"
    EXPORT_CREATED = "export_created"

    # Settings
    SETTINGS_CHANGED = "settings_changed"
    SETTINGS_REJECTED = "settings_rejected"

    # Storage
    STATE_LOADED = "state_loaded"
    STORAGE_CORRUPTED = "storage_corrupted"
    STORAGE_SAVE_FAILED = "storage_save_failed"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    record_id: Optional[str] = Field(
        default=None,
        description="Record this event relates to, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to keyword arguments for the structured logger."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "record_id": self.record_id,
            "description": self.description,
            "details": self.details,
            "is_user_action": self.is_user_action,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.record_added(record_id, "Coffee run", "4.50")
        event = ActivityEventBuilder.import_rejected("3 invalid records", 3)
    """

    @staticmethod
    def record_added(record_id: str, description: str, amount: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_ADDED,
            record_id=record_id,
            description=f"Record added: {description} ({amount})",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(record_id: str, fields: list[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_UPDATED,
            record_id=record_id,
            description=f"Record updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(record_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_DELETED,
            record_id=record_id,
            description="Record deleted",
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(record_id: str, operation: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_NOT_FOUND,
            severity=ActivitySeverity.WARNING,
            record_id=record_id,
            description=f"{operation}: record not found",
            details={"operation": operation},
        )

    @staticmethod
    def validation_failed(errors: dict[str, str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            description=f"Form rejected with {len(errors)} invalid fields",
            details={"fields": sorted(errors)},
            is_user_action=True,
        )

    @staticmethod
    def edit_started(record_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EDIT_STARTED,
            record_id=record_id,
            description="Editing started",
            is_user_action=True,
        )

    @staticmethod
    def edit_cancelled(record_id: Optional[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EDIT_CANCELLED,
            record_id=record_id,
            description="Editing cancelled",
            is_user_action=True,
        )

    @staticmethod
    def import_completed(record_count: int, settings_merged: bool) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_COMPLETED,
            description=f"Imported {record_count} records",
            details={
                "record_count": record_count,
                "settings_merged": settings_merged,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(reason: str, invalid_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_REJECTED,
            severity=ActivitySeverity.WARNING,
            description=f"Import rejected: {reason}",
            details={"invalid_count": invalid_count},
            is_user_action=True,
        )

    @staticmethod
    def export_created(record_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPORT_CREATED,
            description=f"Exported {record_count} records",
            details={"record_count": record_count},
            is_user_action=True,
        )

    @staticmethod
    def settings_changed(changes: dict[str, Any]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SETTINGS_CHANGED,
            description=f"Settings changed: {', '.join(sorted(changes))}",
            details=changes,
            is_user_action=True,
        )

    @staticmethod
    def settings_rejected(field: str, value: Any) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SETTINGS_REJECTED,
            severity=ActivitySeverity.WARNING,
            description=f"Rejected value for {field}",
            details={"field": field, "value": repr(value)},
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(record_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_LOADED,
            description=f"Loaded {record_count} records from storage",
            details={"record_count": record_count},
        )

    @staticmethod
    def storage_corrupted(reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_CORRUPTED,
            severity=ActivitySeverity.ERROR,
            description="Stored data was unreadable, defaults substituted",
            details={"reason": reason},
        )

    @staticmethod
    def storage_save_failed(reason: Optional[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_SAVE_FAILED,
            severity=ActivitySeverity.ERROR,
            description=f"Save failed: {reason or 'unknown'}",
            details={"reason": reason},
        )
