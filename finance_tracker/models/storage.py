"""
Persistence contract models.

Storage never raises to its callers. Every outcome, good or bad, comes
back as one of these.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from finance_tracker.models.record import UserSettings


SaveFailureReason = Literal["unavailable", "quota", "unknown"]


class LoadResult(BaseModel):
    """
    What `StorageInterface.load()` hands back.

    Records are still raw mappings here. The RecordStore decodes them
    into TransactionRecord models when they are installed.
    """

    records: list[dict[str, Any]] = Field(default_factory=list)
    settings: UserSettings = Field(default_factory=UserSettings)
    corrupted: bool = Field(
        default=False,
        description="True when stored content was unreadable and defaults were substituted"
    )


class SaveOutcome(BaseModel):
    """Result of a save attempt."""

    ok: bool
    reason: Optional[SaveFailureReason] = None

    @classmethod
    def success(cls) -> "SaveOutcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: SaveFailureReason) -> "SaveOutcome":
        return cls(ok=False, reason=reason)

    @property
    def user_message(self) -> str:
        if self.ok:
            return ""
        if self.reason == "quota":
            return "Storage is full. Your changes are kept for this session only."
        if self.reason == "unavailable":
            return "Storage is unavailable. Your changes are kept for this session only."
        return "Could not save your changes. They are kept for this session only."


class StorageInfo(BaseModel):
    """Diagnostics for the settings page."""

    available: bool
    has_data: bool = False
    size_bytes: int = Field(default=0, ge=0)
    size_kb: float = Field(default=0.0, ge=0)
    last_updated: Optional[datetime] = None
