"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Form submit (validate → add or update → persist)
2. Edit / delete of existing records
3. Import (decode → validate every record → replace → merge settings → persist)
4. Export (serialize → filename)
5. Display (search → sort → highlight → dashboard)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- A rejected import leaves the store exactly as it was
- A failed save never loses in-memory state
- Every step is logged

The presentation layer talks ONLY to TrackerSession.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field

from finance_tracker.activity import ActivityLogger
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.dashboard import build_dashboard
from finance_tracker.errors import ImportRejectedError
from finance_tracker.models.record import DashboardSummary, TransactionRecord
from finance_tracker.models.storage import SaveOutcome, StorageInfo
from finance_tracker.search import (
    SortField,
    SortState,
    highlight_text,
    is_valid_pattern,
    search_records,
    sort_records,
)
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageInterface,
)
from finance_tracker.store import RecordStore
from finance_tracker.transfer import decode_import, encode_export, export_filename
from finance_tracker.validation import validate_form
from finance_tracker.validation.validator import FORM_FIELDS


# =============================================================================
# OUTCOMES - What each flow hands back to the page
# =============================================================================

class SubmitOutcome(BaseModel):
    """Result of a form submit."""

    ok: bool
    record: Optional[TransactionRecord] = None
    was_update: bool = False
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Field name to message, for every field that failed"
    )
    save: Optional[SaveOutcome] = None


class ImportOutcome(BaseModel):
    """Result of an import attempt."""

    ok: bool
    message: str
    record_count: int = 0
    invalid_count: int = 0
    settings_merged: bool = False
    details: list[str] = Field(default_factory=list)
    save: Optional[SaveOutcome] = None


class SettingsOutcome(BaseModel):
    """Result of a settings change."""

    ok: bool
    changes: dict[str, Any] = Field(default_factory=dict)
    save: Optional[SaveOutcome] = None


class DisplayRow(BaseModel):
    """One table row: the record plus its highlighted cell text."""

    record: TransactionRecord
    description_html: str
    category_html: str
    amount_html: str
    date_html: str


class DisplayState(BaseModel):
    """Everything needed to draw the table and the dashboard."""

    rows: list[DisplayRow]
    dashboard: DashboardSummary
    search_term: str = ""
    pattern_valid: bool = True
    sort: SortState
    editing_id: Optional[str] = None

    @property
    def match_count(self) -> int:
        return len(self.rows)


# =============================================================================
# SESSION
# =============================================================================

class TrackerSession:
    """
    Orchestrates one user session.

    Owns the current search term and sort order. Records and settings
    live in the RecordStore; persistence goes through StorageInterface.
    """

    def __init__(
        self,
        store: RecordStore,
        storage: StorageInterface,
        activity_logger: Optional[ActivityLogger] = None,
        settings: Optional[AppSettings] = None,
        corrupted_on_load: bool = False,
    ):
        self._store = store
        self._storage = storage
        self._activity = activity_logger or ActivityLogger()
        self._settings = settings or get_settings()
        self._sort = SortState()
        self._search_term = ""
        self.corrupted_on_load = corrupted_on_load
        self.last_save: Optional[SaveOutcome] = None

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def activity(self) -> ActivityLogger:
        return self._activity

    @property
    def sort_state(self) -> SortState:
        return self._sort

    @property
    def search_term(self) -> str:
        return self._search_term

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def persist(self) -> SaveOutcome:
        """
        Save current records and settings.

        A failed save is reported, not raised. In-memory state stays as is.
        """
        outcome = self._storage.save(self._store.get_records(), self._store.get_settings())
        self.last_save = outcome
        if not outcome.ok:
            self._activity.log_storage_save_failed(outcome.reason)
        return outcome

    def storage_info(self) -> StorageInfo:
        return self._storage.get_info()

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def submit(self, form_data: Mapping[str, Any]) -> SubmitOutcome:
        """
        Handle the record form.

        Adds a new record, or updates the one being edited. Invalid input
        changes nothing and is not persisted.
        """
        validation = validate_form(form_data, today=self._store.today())
        if not validation.is_valid:
            self._activity.log_validation_failed(validation.errors)
            return SubmitOutcome(ok=False, errors=validation.errors)

        editing_id = self._store.get_editing_id()
        values = {name: form_data.get(name) for name in FORM_FIELDS}

        if editing_id is not None:
            record = self._store.update_record(editing_id, values)
            if record is None:
                self._store.clear_editing_id()
                self._activity.log_record_not_found(editing_id, "update")
                return SubmitOutcome(
                    ok=False,
                    errors={"form": "The record being edited no longer exists."},
                )
            self._activity.log_record_updated(record.id, list(FORM_FIELDS))
        else:
            record = self._store.add_record(values)
            if record is None:
                return SubmitOutcome(
                    ok=False,
                    errors={"form": "The record could not be saved."},
                )
            self._activity.log_record_added(record.id, record.description, record.amount)

        self._store.clear_editing_id()
        save = self.persist()
        return SubmitOutcome(
            ok=True,
            record=record,
            was_update=editing_id is not None,
            save=save,
        )

    def begin_edit(self, record_id: str) -> Optional[TransactionRecord]:
        """Start editing. Returns the record whose values fill the form."""
        if not self._store.set_editing_id(record_id):
            self._activity.log_record_not_found(record_id, "edit")
            return None
        self._activity.log_edit_started(record_id)
        return self._store.find_record(record_id)

    def cancel_edit(self) -> None:
        editing_id = self._store.get_editing_id()
        self._store.clear_editing_id()
        self._activity.log_edit_cancelled(editing_id)

    def delete(self, record_id: str) -> Optional[TransactionRecord]:
        removed = self._store.delete_record(record_id)
        if removed is None:
            self._activity.log_record_not_found(record_id, "delete")
            return None
        self._activity.log_record_deleted(record_id)
        self.persist()
        return removed

    def clear_all(self) -> SaveOutcome:
        """Remove every record. Settings are kept."""
        self._store.clear_all_records()
        return self.persist()

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def import_json(self, text: Any) -> ImportOutcome:
        """
        Replace all records with the contents of an import file.

        CRITICAL: All or nothing. If any record is invalid the store is
        not touched.
        """
        try:
            payload = decode_import(text, today=self._store.today(), now=self._store.now())
        except ImportRejectedError as e:
            self._activity.log_import_rejected(e.reason, e.invalid_count)
            return ImportOutcome(
                ok=False,
                message=e.reason,
                invalid_count=e.invalid_count,
                details=e.details,
            )

        if not self._store.set_records(payload.records):
            reason = "Records could not be installed."
            self._activity.log_import_rejected(reason, 0)
            return ImportOutcome(ok=False, message=reason)

        settings_merged = False
        if payload.settings is not None:
            changes = self._merge_settings(payload.settings.model_dump())
            settings_merged = bool(changes)

        count = self._store.get_record_count()
        self._activity.log_import_completed(count, settings_merged)
        save = self.persist()
        return ImportOutcome(
            ok=True,
            message=f"Imported {count} record{'s' if count != 1 else ''}.",
            record_count=count,
            settings_merged=settings_merged,
            save=save,
        )

    def _merge_settings(self, imported: Mapping[str, Any]) -> dict[str, Any]:
        changes: dict[str, Any] = {}

        cap = imported.get("budget_cap")
        if cap is not None:
            if self._store.set_budget_cap(cap):
                changes["budget_cap"] = str(self._store.get_budget_cap())
            else:
                self._activity.log_settings_rejected("budget_cap", cap)

        changes.update(self._store.set_currencies(
            base_currency=imported.get("base_currency"),
            currency2=imported.get("currency2"),
            currency3=imported.get("currency3"),
        ))
        if changes:
            self._activity.log_settings_changed(changes)
        return changes

    def export_json(self) -> str:
        records = self._store.get_records()
        text = encode_export(records, self._store.get_settings(), exported_at=self._store.now())
        self._activity.log_export_created(len(records))
        return text

    def export_filename(self) -> str:
        return export_filename(self._store.today())

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_budget_cap(self, value: Any) -> SettingsOutcome:
        if not self._store.set_budget_cap(value):
            self._activity.log_settings_rejected("budget_cap", value)
            return SettingsOutcome(ok=False)

        changes = {"budget_cap": str(self._store.get_budget_cap())}
        self._activity.log_settings_changed(changes)
        return SettingsOutcome(ok=True, changes=changes, save=self.persist())

    def update_currencies(
        self,
        base_currency: Any = None,
        currency2: Any = None,
        currency3: Any = None,
    ) -> SettingsOutcome:
        """Apply whichever currency fields are valid. Persists if any changed."""
        changes = self._store.set_currencies(
            base_currency=base_currency,
            currency2=currency2,
            currency3=currency3,
        )
        if not changes:
            self._activity.log_settings_rejected(
                "currencies",
                {"base_currency": base_currency, "currency2": currency2, "currency3": currency3},
            )
            return SettingsOutcome(ok=False)

        self._activity.log_settings_changed(changes)
        return SettingsOutcome(ok=True, changes=changes, save=self.persist())

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def sort_by(self, field: SortField) -> SortState:
        """Same field flips direction; a new field starts ascending."""
        self._sort = self._sort.toggled(field)
        return self._sort

    def set_search(self, term: Optional[str]) -> bool:
        """Set the search term. Returns whether it is a valid pattern."""
        self._search_term = term or ""
        return is_valid_pattern(self._search_term)

    def view(self) -> DisplayState:
        """Filter, sort and highlight the records and build the dashboard."""
        case_insensitive = self._settings.search_case_insensitive
        term = self._search_term

        matches = search_records(self._store.get_records(), term, case_insensitive)
        ordered = sort_records(matches, self._sort.field, self._sort.direction)

        def mark(text: Any) -> str:
            return highlight_text(str(text), term, case_insensitive)

        rows = [
            DisplayRow(
                record=record,
                description_html=mark(record.description),
                category_html=mark(record.category.value),
                amount_html=mark(record.amount),
                date_html=mark(record.date.isoformat()),
            )
            for record in ordered
        ]

        return DisplayState(
            rows=rows,
            dashboard=build_dashboard(self._store, recent_days=self._settings.recent_days),
            search_term=term,
            pattern_valid=is_valid_pattern(term),
            sort=self._sort,
            editing_id=self._store.get_editing_id(),
        )


def create_app_components(
    settings: Optional[AppSettings] = None,
    storage: Optional[StorageInterface] = None,
) -> TrackerSession:
    """
    Factory function to create a ready-to-use session.

    Loads stored state. Corrupt or invalid stored data is replaced by
    defaults and flagged on the session. If the storage file cannot be
    written the session runs on in-memory storage.

    Args:
        settings: Application settings (loaded from env if omitted)
        storage: Storage backend. Defaults to the JSON file at
                 settings.storage_path.
    """
    settings = settings or get_settings()
    activity_logger = ActivityLogger()

    if storage is None:
        storage = JsonFileStorage(settings.storage_path)
        if not storage.get_info().available:
            activity_logger.log_storage_save_failed("unavailable")
            storage = InMemoryStorage()

    loaded = storage.load()
    corrupted = loaded.corrupted
    store = RecordStore(settings=loaded.settings)

    if corrupted:
        activity_logger.log_storage_corrupted("stored data could not be read")
    elif not store.set_records(loaded.records):
        corrupted = True
        activity_logger.log_storage_corrupted("stored records failed validation")
        storage.clear()
        store = RecordStore()
    else:
        activity_logger.log_state_loaded(store.get_record_count())

    return TrackerSession(
        store=store,
        storage=storage,
        activity_logger=activity_logger,
        settings=settings,
        corrupted_on_load=corrupted,
    )
