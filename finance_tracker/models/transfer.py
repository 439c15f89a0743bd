"""
Import/export file schema.

    {
      "records":    [TransactionRecord, ...],
      "settings":   {"budgetCap"?, "baseCurrency"?, "currency2"?, "currency3"?},
      "exportedAt": "2024-01-10T12:00:00+00:00"
    }

Settings in an imported file are partial: every key is optional and only
the keys present are merged into the current settings.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finance_tracker.models.record import TransactionRecord, UserSettings


class ImportedSettings(BaseModel):
    """
    Settings block of an imported file.

    Values are kept loose here. The RecordStore applies its own coercion
    rules when they are merged, so a bad sub-field is skipped rather than
    failing the whole import.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    budget_cap: Optional[Any] = None
    base_currency: Optional[Any] = None
    currency2: Optional[Any] = None
    currency3: Optional[Any] = None


class ImportPayload(BaseModel):
    """A fully decoded and validated import file."""

    records: list[TransactionRecord]
    settings: Optional[ImportedSettings] = None
    exported_at: Optional[datetime] = None


class ExportPayload(BaseModel):
    """What an export writes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    records: list[TransactionRecord] = Field(default_factory=list)
    settings: UserSettings = Field(default_factory=UserSettings)
    exported_at: datetime
