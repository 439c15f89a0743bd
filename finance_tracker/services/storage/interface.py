"""
Abstract Storage Interface

DESIGN DECISION: Persistence sits behind an abstract interface.
This allows us to:
1. Keep the JSON file backend out of the business logic
2. Use in-memory storage for testing
3. Run a session with no working storage at all

The interface is deliberately small: one blob holding every record and
the user settings, read once at startup and rewritten after each change.

CRITICAL: Implementations NEVER raise out of load() or save(). Failures
come back as LoadResult.corrupted or SaveOutcome.reason and the session
carries on in memory.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from finance_tracker.errors import TrackerError
from finance_tracker.models.record import TransactionRecord, UserSettings
from finance_tracker.models.storage import LoadResult, SaveOutcome, StorageInfo


STORAGE_VERSION = "1.1"


class StorageInterface(ABC):
    """
    Abstract interface for tracker persistence.

    Any storage implementation (JSON file, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> LoadResult:
        """
        Read the stored records and settings.

        Returns:
            Defaults when nothing is stored or storage is unavailable.
            Defaults with corrupted=True when the stored blob was
            unreadable; the blob is removed in that case.
        """
        pass

    @abstractmethod
    def save(
        self,
        records: Sequence[TransactionRecord],
        settings: UserSettings,
    ) -> SaveOutcome:
        """
        Replace the stored blob.

        Returns:
            SaveOutcome.success(), or a failure with reason
            "unavailable", "quota" or "unknown"
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored blob, if any."""
        pass

    @abstractmethod
    def get_info(self) -> StorageInfo:
        """Size and freshness of the stored blob."""
        pass


def build_blob(
    records: Sequence[TransactionRecord],
    settings: UserSettings,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """The stored document: {records, settings, version, lastUpdated}."""
    return {
        "records": [record.to_wire() for record in records],
        "settings": settings.to_wire(),
        "version": STORAGE_VERSION,
        "lastUpdated": (now or datetime.now(timezone.utc)).isoformat(),
    }


def read_blob(document: Any) -> LoadResult:
    """
    Shape-check a stored document.

    `records` must be a list of objects and `settings` an object when present.
    Stored settings are merged over the defaults.

    Raises:
        CorruptDataError: The document does not have that shape.
    """
    if not isinstance(document, dict):
        raise CorruptDataError("stored data is not an object")

    records = document.get("records", [])
    if not isinstance(records, list):
        raise CorruptDataError("records is not a list")
    if not all(isinstance(record, dict) for record in records):
        raise CorruptDataError("records contains entries that are not objects")

    stored_settings = document.get("settings", {})
    if not isinstance(stored_settings, dict):
        raise CorruptDataError("settings is not an object")

    merged = {**UserSettings().to_wire(), **stored_settings}
    try:
        settings = UserSettings.model_validate(merged)
    except ValidationError as e:
        raise CorruptDataError(f"settings are invalid: {e.error_count()} errors") from e

    return LoadResult(records=records, settings=settings)


class StorageError(TrackerError):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage backend cannot be read or written at all."""
    pass


class CorruptDataError(StorageError):
    """Stored content could not be decoded."""
    pass
