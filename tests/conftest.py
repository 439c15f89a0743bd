"""Shared fixtures for the finance tracker tests."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from finance_tracker.config import AppSettings
from finance_tracker.models import Category, TransactionRecord
from finance_tracker.orchestrator import TrackerSession
from finance_tracker.services.storage import InMemoryStorage
from finance_tracker.store import RecordStore


FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
FIXED_TODAY = date(2024, 1, 15)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: int = 60) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


def make_record(
    record_id: str = "rec-1",
    description: str = "Coffee run",
    amount: str = "4.50",
    category: Category = Category.FOOD,
    record_date: date = date(2024, 1, 10),
) -> TransactionRecord:
    return TransactionRecord(
        id=record_id,
        description=description,
        amount=Decimal(amount),
        category=category,
        date=record_date,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return RecordStore(clock=clock, today=lambda: FIXED_TODAY)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(
        storage_path=tmp_path / "finance-tracker.json",
        log_json=False,
    )


@pytest.fixture
def session(store, storage, app_settings):
    return TrackerSession(store=store, storage=storage, settings=app_settings)


@pytest.fixture
def coffee_form():
    return {
        "description": "Coffee run",
        "amount": "4.50",
        "category": "Food",
        "date": "2024-01-10",
    }


@pytest.fixture
def sample_records():
    return [
        make_record("rec-1", "Coffee run", "4.50", Category.FOOD, date(2024, 1, 10)),
        make_record("rec-2", "Bus pass", "30.00", Category.TRANSPORT, date(2024, 1, 2)),
        make_record("rec-3", "Algorithms textbook", "89.99", Category.BOOKS, date(2024, 1, 12)),
        make_record("rec-4", "Cinema tickets", "24.00", Category.ENTERTAINMENT, date(2023, 12, 28)),
    ]
