"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
Everything the RecordStore holds, and everything crossing the storage or
import/export boundary, conforms to these schemas.
"""

from finance_tracker.models.record import (
    BudgetStatus,
    Category,
    ConvertedTotal,
    CurrencyEntry,
    DashboardSummary,
    FieldValidation,
    FormValidation,
    TransactionRecord,
    UserSettings,
)
from finance_tracker.models.storage import (
    LoadResult,
    SaveOutcome,
    StorageInfo,
)
from finance_tracker.models.transfer import (
    ExportPayload,
    ImportedSettings,
    ImportPayload,
)
from finance_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Record models
    "BudgetStatus",
    "Category",
    "ConvertedTotal",
    "CurrencyEntry",
    "DashboardSummary",
    "FieldValidation",
    "FormValidation",
    "TransactionRecord",
    "UserSettings",
    # Storage models
    "LoadResult",
    "SaveOutcome",
    "StorageInfo",
    # Transfer models
    "ExportPayload",
    "ImportedSettings",
    "ImportPayload",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
