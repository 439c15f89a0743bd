"""
JSON Import / Export

Import files are untrusted input. `decode_import` either returns a fully
validated ImportPayload or raises ImportRejectedError. There is no
partial result: one bad record rejects the whole file.

Record checks on import are the same rules a user faces when typing a
record into the form, plus a required id. A record without timestamps
is stamped with the import time.
"""

import json
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from finance_tracker.errors import ImportRejectedError
from finance_tracker.models.record import TransactionRecord, UserSettings
from finance_tracker.models.transfer import (
    ExportPayload,
    ImportedSettings,
    ImportPayload,
)
from finance_tracker.validation.validator import validate_imported_record


logger = structlog.get_logger(__name__)

EXPORT_FILENAME_PREFIX = "finance-tracker-export"

TIMESTAMP_FIELDS = ("createdAt", "updatedAt")

_TIMESTAMP = TypeAdapter(datetime)


def _parse(text: Any) -> Any:
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    try:
        # Decimal keeps amounts like 4.50 exact
        return json.loads(text, parse_float=Decimal)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise ImportRejectedError(f"File is not valid JSON: {e}") from e


def _decode_record(raw: Mapping[str, Any], stamp: datetime) -> TransactionRecord:
    data = dict(raw)
    for key in TIMESTAMP_FIELDS:
        if not data.get(key):
            data[key] = stamp
    return TransactionRecord.model_validate(data)


def decode_import(
    text: Any,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ImportPayload:
    """
    Decode and validate an import file.

    Args:
        text: Raw file content (str or UTF-8 bytes)
        today: Reference day for the future-date rule
        now: Timestamp for records that carry no createdAt/updatedAt

    Raises:
        ImportRejectedError: The file is not JSON, has the wrong shape,
            or contains at least one invalid record.
    """
    document = _parse(text)

    if not isinstance(document, Mapping):
        raise ImportRejectedError("File must contain a JSON object.")

    raw_records = document.get("records")
    if isinstance(raw_records, (str, Mapping)) or not isinstance(raw_records, Sequence):
        raise ImportRejectedError("The 'records' field must be a list.")

    raw_settings = document.get("settings")
    if raw_settings is not None and not isinstance(raw_settings, Mapping):
        raise ImportRejectedError("The 'settings' field must be an object.")

    stamp = now or datetime.now(timezone.utc)
    problems: list[str] = []
    invalid_positions: set[int] = set()
    records: list[TransactionRecord] = []
    seen_ids: dict[str, int] = {}

    for position, raw in enumerate(raw_records):
        record_problems = validate_imported_record(raw, today=today)
        if not record_problems:
            try:
                record = _decode_record(raw, stamp)
            except ValidationError as e:
                record_problems = [
                    f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                    for err in e.errors(include_url=False)
                ]
            else:
                if record.id in seen_ids:
                    record_problems = [f"Duplicate id {record.id!r}."]
                else:
                    seen_ids[record.id] = position
                    records.append(record)

        if record_problems:
            invalid_positions.add(position)
            problems.extend(f"Record {position + 1}: {p}" for p in record_problems)

    if invalid_positions:
        count = len(invalid_positions)
        raise ImportRejectedError(
            f"{count} invalid record{'s' if count != 1 else ''} found. Nothing was imported.",
            invalid_count=count,
            details=problems,
        )

    settings = ImportedSettings.model_validate(raw_settings) if raw_settings is not None else None

    exported_at = None
    raw_exported_at = document.get("exportedAt")
    if raw_exported_at:
        try:
            exported_at = _TIMESTAMP.validate_python(raw_exported_at)
        except ValidationError:
            # exportedAt is informational only
            logger.debug("import_exported_at_unreadable", value=str(raw_exported_at))

    logger.info("import_decoded", record_count=len(records), has_settings=settings is not None)
    return ImportPayload(records=records, settings=settings, exported_at=exported_at)


def encode_export(
    records: Sequence[TransactionRecord],
    settings: UserSettings,
    exported_at: Optional[datetime] = None,
) -> str:
    """Serialize records and settings to the export file format."""
    payload = ExportPayload(
        records=list(records),
        settings=settings,
        exported_at=exported_at or datetime.now(timezone.utc),
    )
    return json.dumps(payload.model_dump(mode="json", by_alias=True), indent=2)


def export_filename(today: Optional[date] = None) -> str:
    """finance-tracker-export-YYYY-MM-DD.json"""
    return f"{EXPORT_FILENAME_PREFIX}-{(today or date.today()).isoformat()}.json"
