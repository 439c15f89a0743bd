"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, validators, store)
2. Integration tests for flows (with in-memory storage)
3. No real files outside tmp_path
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from finance_tracker.models import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    Category,
    CurrencyEntry,
    FormValidation,
    SaveOutcome,
    TransactionRecord,
    UserSettings,
)


NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def record_kwargs(**overrides):
    values = {
        "id": "abc123",
        "description": "Coffee run",
        "amount": Decimal("4.50"),
        "category": Category.FOOD,
        "date": date(2024, 1, 10),
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return values


class TestTransactionRecord:
    """Tests for the TransactionRecord model."""

    def test_record_creation(self):
        """Test TransactionRecord model creation."""
        record = TransactionRecord(**record_kwargs())
        assert record.description == "Coffee run"
        assert record.amount == Decimal("4.50")
        assert record.category == Category.FOOD

    def test_record_accepts_camel_case_keys(self):
        """Test that stored camelCase keys populate the model."""
        record = TransactionRecord.model_validate({
            "id": "abc123",
            "description": "Coffee run",
            "amount": 4.5,
            "category": "Food",
            "date": "2024-01-10",
            "createdAt": "2024-01-15T12:00:00+00:00",
            "updatedAt": "2024-01-15T12:00:00+00:00",
        })
        assert record.created_at == NOW
        assert record.date == date(2024, 1, 10)

    def test_to_wire_uses_camel_case_and_numbers(self):
        """Test wire format keys and amount type."""
        wire = TransactionRecord(**record_kwargs()).to_wire()
        assert set(wire) == {
            "id", "description", "amount", "category", "date", "createdAt", "updatedAt",
        }
        assert wire["amount"] == 4.5
        assert wire["category"] == "Food"
        assert wire["date"] == "2024-01-10"

    def test_record_rejects_blank_description(self):
        """Test that whitespace-only descriptions are rejected."""
        with pytest.raises(ValueError):
            TransactionRecord(**record_kwargs(description="   "))

    def test_record_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValueError):
            TransactionRecord(**record_kwargs(amount=Decimal("0")))
        with pytest.raises(ValueError):
            TransactionRecord(**record_kwargs(amount=Decimal("-1")))

    def test_record_rejects_amount_over_limit(self):
        """Test the one million ceiling."""
        with pytest.raises(ValueError):
            TransactionRecord(**record_kwargs(amount=Decimal("1000000.01")))

    def test_record_rejects_unknown_category(self):
        """Test that categories outside the enum are rejected."""
        with pytest.raises(ValueError):
            TransactionRecord(**record_kwargs(category="Groceries"))


class TestSettingsModels:
    """Tests for user settings models."""

    def test_defaults(self):
        """Test default settings values."""
        settings = UserSettings()
        assert settings.budget_cap == Decimal("500")
        assert settings.base_currency == "USD"
        assert settings.currency2 == CurrencyEntry(code="EUR", rate=0.92)
        assert settings.currency3 == CurrencyEntry(code="KES", rate=130)

    def test_to_wire(self):
        """Test settings wire format."""
        wire = UserSettings().to_wire()
        assert wire["budgetCap"] == 500.0
        assert wire["baseCurrency"] == "USD"
        assert wire["currency2"] == {"code": "EUR", "rate": 0.92}

    def test_currency_rate_must_be_positive_and_finite(self):
        """Test rate bounds."""
        with pytest.raises(ValueError):
            CurrencyEntry(code="EUR", rate=0)
        with pytest.raises(ValueError):
            CurrencyEntry(code="EUR", rate=float("inf"))

    def test_currency_code_length(self):
        """Test that codes longer than 3 characters are rejected."""
        with pytest.raises(ValueError):
            CurrencyEntry(code="EURO", rate=1)

    def test_budget_cap_cannot_be_negative(self):
        """Test budget cap floor."""
        with pytest.raises(ValueError):
            UserSettings(budget_cap=Decimal("-1"))


class TestOutcomeModels:
    """Tests for validation and storage outcome models."""

    def test_form_validation_error_count(self):
        """Test error_count property."""
        result = FormValidation(
            is_valid=False,
            errors={"amount": "Amount is required.", "date": "Date is required."},
        )
        assert result.error_count == 2

    def test_save_outcome_success(self):
        """Test successful save outcome."""
        outcome = SaveOutcome.success()
        assert outcome.ok is True
        assert outcome.reason is None
        assert outcome.user_message == ""

    def test_save_outcome_failure_messages(self):
        """Test each failure reason has a user message."""
        assert "full" in SaveOutcome.failure("quota").user_message
        assert "unavailable" in SaveOutcome.failure("unavailable").user_message
        assert "Could not save" in SaveOutcome.failure("unknown").user_message


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.RECORD_ADDED,
            description="Test record added",
        )
        assert event.event_type == ActivityEventType.RECORD_ADDED
        assert event.severity == ActivitySeverity.INFO

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEventBuilder.record_added("abc123", "Coffee run", "4.50")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "record_added"
        assert log_dict["record_id"] == "abc123"
        assert log_dict["details"]["amount"] == "4.50"
        assert log_dict["is_user_action"] is True

    def test_builder_import_rejected(self):
        """Test ActivityEventBuilder.import_rejected."""
        event = ActivityEventBuilder.import_rejected("2 invalid records", 2)
        assert event.event_type == ActivityEventType.IMPORT_REJECTED
        assert event.severity == ActivitySeverity.WARNING
        assert event.details["invalid_count"] == 2

    def test_builder_storage_save_failed(self):
        """Test ActivityEventBuilder.storage_save_failed."""
        event = ActivityEventBuilder.storage_save_failed("quota")
        assert event.severity == ActivitySeverity.ERROR
        assert "quota" in event.description


class TestCategories:
    """Tests for the category enum."""

    def test_all_categories_exist(self):
        """Test that expected categories exist."""
        expected = ["Food", "Books", "Transport", "Entertainment", "Fees", "Other"]
        assert [category.value for category in Category] == expected

    def test_category_lookup(self):
        """Test category lookup by value."""
        assert Category("Food") is Category.FOOD


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
