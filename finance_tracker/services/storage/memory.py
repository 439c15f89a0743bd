"""
In-Memory Storage

Holds the serialized blob in a string, exactly as the file backend would
write it. Used by tests and as the fallback when no file can be written.
"""

import json
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

import structlog

from finance_tracker.models.record import TransactionRecord, UserSettings
from finance_tracker.models.storage import (
    LoadResult,
    SaveFailureReason,
    SaveOutcome,
    StorageInfo,
)
from finance_tracker.services.storage.interface import (
    CorruptDataError,
    StorageInterface,
    build_blob,
    read_blob,
)


class InMemoryStorage(StorageInterface):
    """
    Storage that lives as long as the process.

    Args:
        raw: Initial stored text, as if read from disk.
        fail_with: Make every save fail with this reason.
    """

    def __init__(
        self,
        raw: Optional[str] = None,
        fail_with: Optional[SaveFailureReason] = None,
    ):
        self.raw = raw
        self.fail_with = fail_with
        self.save_count = 0
        self._logger = structlog.get_logger(__name__)

    def load(self) -> LoadResult:
        if not self.raw:
            return LoadResult()
        try:
            return read_blob(json.loads(self.raw))
        except (json.JSONDecodeError, CorruptDataError) as e:
            self._logger.error("storage_corrupted", error=str(e))
            self.raw = None
            return LoadResult(corrupted=True)

    def save(
        self,
        records: Sequence[TransactionRecord],
        settings: UserSettings,
    ) -> SaveOutcome:
        if self.fail_with is not None:
            return SaveOutcome.failure(self.fail_with)
        self.raw = json.dumps(build_blob(records, settings))
        self.save_count += 1
        return SaveOutcome.success()

    def clear(self) -> None:
        self.raw = None

    def get_info(self) -> StorageInfo:
        if not self.raw:
            return StorageInfo(available=True)
        size = len(self.raw.encode("utf-8"))
        last_updated = None
        try:
            last_updated = datetime.fromisoformat(json.loads(self.raw)["lastUpdated"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            self._logger.debug("storage_last_updated_unreadable", error=str(e))

        return StorageInfo(
            available=True,
            has_data=True,
            size_bytes=size,
            size_kb=round(size / 1024, 2),
            last_updated=last_updated,
        )
