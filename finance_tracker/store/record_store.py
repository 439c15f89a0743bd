"""
Record Store

The single owner of transaction records and user settings. Nothing else
mutates either collection.

GUARANTEES:
- Record ids are unique and never reused, even after deletion
- `id` and `created_at` never change once a record exists
- Every record held passes the TransactionRecord schema
- Callers only ever receive copies

Failed operations (unknown id, bad input) return None or False. They do
not raise.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import uuid4

import structlog
from pydantic import ValidationError

from finance_tracker.models.record import (
    Category,
    CurrencyEntry,
    TransactionRecord,
    UserSettings,
)
from finance_tracker.validation.validator import coerce_amount


REQUIRED_FIELDS = ("description", "amount", "category", "date")

# Keys an update may never touch. updated_at is stamped by the store.
PROTECTED_FIELDS = frozenset({"id", "created_at", "createdAt", "updated_at", "updatedAt"})

CURRENCY_SLOTS = ("currency2", "currency3")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class RecordStore:
    """
    In-memory store for one tracker session.

    Construct one per session. Tests can build as many independent
    instances as they like.

    Args:
        clock: Returns the current timestamp for created_at/updated_at.
        today: Returns the current local date for date-window queries.
        settings: Initial user settings (defaults if omitted).
    """

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        today: Optional[Callable[[], date]] = None,
        settings: Optional[UserSettings] = None,
    ):
        self._clock = clock or _utc_now
        self._today = today or date.today
        self._records: list[TransactionRecord] = []
        self._settings = settings.model_copy(deep=True) if settings else UserSettings()
        self._editing_id: Optional[str] = None
        self._issued_ids: set[str] = set()
        self._logger = structlog.get_logger(__name__)

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._today()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _generate_id(self) -> str:
        while True:
            candidate = uuid4().hex
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate

    def _index_of(self, record_id: Any) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return -1

    @staticmethod
    def _copy(record: TransactionRecord) -> TransactionRecord:
        return record.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get_records(self) -> list[TransactionRecord]:
        return [self._copy(record) for record in self._records]

    def get_record_count(self) -> int:
        return len(self._records)

    def find_record(self, record_id: str) -> Optional[TransactionRecord]:
        index = self._index_of(record_id)
        if index == -1:
            return None
        return self._copy(self._records[index])

    def add_record(self, fields: Mapping[str, Any]) -> Optional[TransactionRecord]:
        """
        Create a record from form values.

        Requires description, amount, category and date. Returns the
        stored record (as a copy), or None if anything is missing or
        the values do not fit the record schema.
        """
        if not isinstance(fields, Mapping):
            self._logger.error("add_record_rejected", reason="fields is not a mapping")
            return None

        missing = [name for name in REQUIRED_FIELDS if _is_missing(fields.get(name))]
        if missing:
            self._logger.warning("add_record_rejected", missing=missing)
            return None

        amount = coerce_amount(fields["amount"])
        if amount is None:
            self._logger.warning("add_record_rejected", reason="amount is not numeric")
            return None

        now = self._clock()
        try:
            record = TransactionRecord(
                id=self._generate_id(),
                description=fields["description"],
                amount=amount,
                category=fields["category"],
                date=fields["date"],
                created_at=now,
                updated_at=now,
            )
        except ValidationError as e:
            self._logger.warning("add_record_rejected", errors=e.errors(include_url=False))
            return None

        self._records.append(record)
        return self._copy(record)

    def update_record(
        self,
        record_id: str,
        updates: Mapping[str, Any],
    ) -> Optional[TransactionRecord]:
        """
        Merge `updates` into an existing record.

        `id` and `created_at` in updates are ignored. Returns the updated
        copy, or None if the id is unknown or the result would be invalid
        (in which case the stored record is left as it was).
        """
        index = self._index_of(record_id)
        if index == -1:
            self._logger.warning("update_record_not_found", record_id=record_id)
            return None

        changes = {
            key: value
            for key, value in dict(updates or {}).items()
            if key not in PROTECTED_FIELDS and value is not None
        }

        if "amount" in changes:
            amount = coerce_amount(changes["amount"])
            if amount is None:
                self._logger.warning("update_record_rejected", record_id=record_id,
                                     reason="amount is not numeric")
                return None
            changes["amount"] = amount

        data = self._records[index].model_dump()
        data.update(changes)
        data["updated_at"] = self._clock()

        try:
            updated = TransactionRecord.model_validate(data)
        except ValidationError as e:
            self._logger.warning(
                "update_record_rejected",
                record_id=record_id,
                errors=e.errors(include_url=False),
            )
            return None

        self._records[index] = updated
        return self._copy(updated)

    def delete_record(self, record_id: str) -> Optional[TransactionRecord]:
        index = self._index_of(record_id)
        if index == -1:
            self._logger.warning("delete_record_not_found", record_id=record_id)
            return None

        removed = self._records.pop(index)
        if self._editing_id == record_id:
            self._editing_id = None
        return self._copy(removed)

    def delete_records(self, record_ids: Sequence[str]) -> list[TransactionRecord]:
        """Remove every record whose id is listed. Returns the removed records."""
        targets = set(record_ids)
        removed = [record for record in self._records if record.id in targets]
        self._records = [record for record in self._records if record.id not in targets]
        if self._editing_id in targets:
            self._editing_id = None
        return [self._copy(record) for record in removed]

    def clear_all_records(self) -> None:
        self._records = []
        self._editing_id = None

    def set_records(self, records: Any) -> bool:
        """
        Replace every record at once (load and import).

        Each element may be a TransactionRecord or a mapping in wire
        format. Returns False and changes nothing if `records` is not a
        sequence, if any element does not fit the record schema, or if
        two elements share an id.
        """
        if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
            self._logger.error(
                "set_records_rejected",
                reason="expected a sequence",
                got=type(records).__name__,
            )
            return False

        decoded: list[TransactionRecord] = []
        for position, item in enumerate(records):
            try:
                if isinstance(item, TransactionRecord):
                    decoded.append(item.model_copy(deep=True))
                else:
                    decoded.append(TransactionRecord.model_validate(item))
            except ValidationError as e:
                self._logger.error(
                    "set_records_rejected",
                    position=position,
                    errors=e.errors(include_url=False),
                )
                return False

        ids = [record.id for record in decoded]
        if len(set(ids)) != len(ids):
            self._logger.error("set_records_rejected", reason="duplicate ids")
            return False

        self._records = decoded
        self._issued_ids.update(ids)
        if self._editing_id not in ids:
            self._editing_id = None
        return True

    # -------------------------------------------------------------------------
    # Editing session
    # -------------------------------------------------------------------------

    def set_editing_id(self, record_id: str) -> bool:
        """Mark a record as being edited. Unknown ids are refused."""
        if self._index_of(record_id) == -1:
            return False
        self._editing_id = record_id
        return True

    def clear_editing_id(self) -> None:
        self._editing_id = None

    def is_editing(self) -> bool:
        return self._editing_id is not None

    def get_editing_id(self) -> Optional[str]:
        return self._editing_id

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def get_settings(self) -> UserSettings:
        return self._settings.model_copy(deep=True)

    def get_budget_cap(self) -> Decimal:
        return self._settings.budget_cap

    def set_budget_cap(self, value: Any) -> bool:
        cap = coerce_amount(value)
        if cap is None or cap < 0:
            self._logger.warning("budget_cap_rejected", value=repr(value))
            return False
        self._settings.budget_cap = cap
        return True

    @staticmethod
    def _normalize_code(value: Any) -> Optional[str]:
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip().upper()[:3]

    @staticmethod
    def _normalize_rate(value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        rate = coerce_amount(value)
        if rate is None or rate <= 0:
            return None
        return float(rate)

    def set_currencies(
        self,
        base_currency: Any = None,
        currency2: Any = None,
        currency3: Any = None,
    ) -> dict[str, Any]:
        """
        Update currency settings field by field.

        Codes are uppercased and cut to 3 characters. Rates must be
        finite and positive. Anything absent or invalid is left as it
        was.

        Returns:
            The changes that were applied, keyed by setting path
            (e.g. {"currency2.rate": 0.95}).
        """
        applied: dict[str, Any] = {}

        code = self._normalize_code(base_currency)
        if code is not None:
            self._settings.base_currency = code
            applied["base_currency"] = code

        for slot, entry in zip(CURRENCY_SLOTS, (currency2, currency3)):
            if isinstance(entry, CurrencyEntry):
                entry = entry.model_dump()
            if not isinstance(entry, Mapping):
                continue

            current: CurrencyEntry = getattr(self._settings, slot)
            new_code = self._normalize_code(entry.get("code"))
            new_rate = self._normalize_rate(entry.get("rate"))

            if new_code is not None:
                current.code = new_code
                applied[f"{slot}.code"] = new_code
            if new_rate is not None:
                current.rate = new_rate
                applied[f"{slot}.rate"] = new_rate

        return applied

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_total_spent(self) -> Decimal:
        return sum((record.amount for record in self._records), Decimal("0"))

    def get_top_category(self) -> Optional[Category]:
        """
        Most frequent category.

        Ties go to the category that appeared first. None when empty.
        """
        counts: dict[Category, int] = {}
        for record in self._records:
            counts[record.category] = counts.get(record.category, 0) + 1

        top, top_count = None, 0
        for category, count in counts.items():
            if count > top_count:
                top, top_count = category, count
        return top

    def get_records_in_last_days(self, days: int) -> list[TransactionRecord]:
        """Records dated on or after today minus `days` days."""
        cutoff = self._today() - timedelta(days=days)
        return [self._copy(record) for record in self._records if record.date >= cutoff]
