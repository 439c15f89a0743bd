"""
JSON File Storage

Keeps the whole tracker state in one JSON document on local disk.

Writes go to a sibling `.tmp` file which then replaces the real file, so
a crash mid-write never leaves a half-written document behind.

Error mapping for save():
- Disk full / over quota (ENOSPC, EDQUOT) -> "quota"
- Directory missing or not writable       -> "unavailable"
- Anything else                           -> "unknown"
"""

import errno
import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import structlog

from finance_tracker.models.record import TransactionRecord, UserSettings
from finance_tracker.models.storage import LoadResult, SaveOutcome, StorageInfo
from finance_tracker.services.storage.interface import (
    CorruptDataError,
    StorageInterface,
    StorageUnavailableError,
    build_blob,
    read_blob,
)


QUOTA_ERRNOS = {errno.ENOSPC, errno.EDQUOT}


class JsonFileStorage(StorageInterface):
    """
    File-backed storage.

    Usage:
        storage = JsonFileStorage(Path("data/finance-tracker.json"))
        result = storage.load()
        storage.save(records, settings)
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._available: Optional[bool] = None
        self._logger = structlog.get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def _tmp_path(self) -> Path:
        return self._path.with_suffix(self._path.suffix + ".tmp")

    def _probe(self) -> bool:
        """Check once whether the target directory can be written."""
        if self._available is not None:
            return self._available

        probe = self._path.with_suffix(self._path.suffix + ".probe")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            probe.write_text("probe", encoding="utf-8")
            probe.unlink()
            self._available = True
        except OSError as e:
            self._logger.warning("storage_unavailable", path=str(self._path), error=str(e))
            self._available = False
        return self._available

    def _ensure_available(self) -> None:
        if not self._probe():
            raise StorageUnavailableError(f"cannot write to {self._path.parent}")

    def _discard(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            self._logger.error("storage_discard_failed", path=str(self._path), error=str(e))

    def load(self) -> LoadResult:
        if not self._probe() or not self._path.exists():
            return LoadResult()

        try:
            raw = self._path.read_bytes()
        except OSError as e:
            self._logger.error("storage_read_failed", path=str(self._path), error=str(e))
            return LoadResult()

        if not raw.strip():
            return LoadResult()

        try:
            result = read_blob(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, CorruptDataError) as e:
            self._logger.error("storage_corrupted", path=str(self._path), error=str(e))
            self._discard()
            return LoadResult(corrupted=True)

        self._logger.info("storage_loaded", path=str(self._path), record_count=len(result.records))
        return result

    def save(
        self,
        records: Sequence[TransactionRecord],
        settings: UserSettings,
    ) -> SaveOutcome:
        try:
            self._ensure_available()
            tmp_path = self._tmp_path
            tmp_path.write_text(
                json.dumps(build_blob(records, settings), ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
            tmp_path.replace(self._path)
        except StorageUnavailableError:
            return SaveOutcome.failure("unavailable")
        except PermissionError as e:
            self._logger.error("storage_save_failed", reason="unavailable", error=str(e))
            return SaveOutcome.failure("unavailable")
        except OSError as e:
            reason = "quota" if e.errno in QUOTA_ERRNOS else "unknown"
            self._logger.error("storage_save_failed", reason=reason, error=str(e))
            return SaveOutcome.failure(reason)
        except (TypeError, ValueError) as e:
            self._logger.error("storage_save_failed", reason="unknown", error=str(e))
            return SaveOutcome.failure("unknown")

        return SaveOutcome.success()

    def clear(self) -> None:
        if not self._probe():
            return
        self._discard()

    def get_info(self) -> StorageInfo:
        if not self._probe():
            return StorageInfo(available=False)

        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return StorageInfo(available=True)
        except OSError as e:
            self._logger.warning("storage_info_failed", error=str(e))
            return StorageInfo(available=True)

        size = len(raw)
        last_updated = None
        try:
            last_updated = datetime.fromisoformat(json.loads(raw)["lastUpdated"])
        except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as e:
            self._logger.debug("storage_last_updated_unreadable", error=str(e))

        return StorageInfo(
            available=True,
            has_data=size > 0,
            size_bytes=size,
            size_kb=round(size / 1024, 2),
            last_updated=last_updated,
        )
