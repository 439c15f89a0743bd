"""In-memory record store."""

from finance_tracker.store.record_store import RecordStore

__all__ = ["RecordStore"]
