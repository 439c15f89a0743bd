"""Tests for JSON import and export."""

import json
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from conftest import FIXED_NOW, FIXED_TODAY
from finance_tracker.errors import ImportRejectedError
from finance_tracker.models import UserSettings
from finance_tracker.transfer import decode_import, encode_export, export_filename


def wire_record(record_id="abc123", **overrides):
    values = {
        "id": record_id,
        "description": "Coffee run",
        "amount": 4.5,
        "category": "Food",
        "date": "2024-01-10",
        "createdAt": "2024-01-10T08:00:00Z",
        "updatedAt": "2024-01-10T08:00:00Z",
    }
    values.update(overrides)
    return values


def import_text(records, **extra):
    return json.dumps({"records": records, **extra})


class TestExport:
    """Tests for encode_export."""

    def test_export_format(self, sample_records):
        """Test top-level keys and camelCase fields."""
        text = encode_export(sample_records, UserSettings(), exported_at=FIXED_NOW)
        document = json.loads(text)

        assert set(document) == {"records", "settings", "exportedAt"}
        assert len(document["records"]) == 4
        assert document["records"][0]["createdAt"]
        assert document["records"][0]["amount"] == 4.5
        assert document["settings"]["budgetCap"] == 500.0
        assert document["exportedAt"].startswith("2024-01-15T12:00:00")

    def test_export_is_indented(self, sample_records):
        """Test human-readable output."""
        text = encode_export(sample_records, UserSettings(), exported_at=FIXED_NOW)
        assert "\n  " in text

    def test_export_filename(self):
        """Test file name format."""
        assert export_filename(date(2024, 1, 15)) == "finance-tracker-export-2024-01-15.json"


class TestRoundTrip:
    """Tests that export followed by import changes nothing."""

    def test_records_and_settings_survive(self, sample_records):
        """Test export→import reproduces the same data."""
        settings = UserSettings(budget_cap=Decimal("321.50"), base_currency="GBP")
        text = encode_export(sample_records, settings, exported_at=FIXED_NOW)

        payload = decode_import(text, today=FIXED_TODAY)

        assert payload.records == sample_records
        assert Decimal(str(payload.settings.budget_cap)) == Decimal("321.50")
        assert payload.settings.base_currency == "GBP"
        assert payload.settings.currency2 == {"code": "EUR", "rate": Decimal("0.92")}
        assert payload.exported_at == FIXED_NOW

    def test_bytes_input(self, sample_records):
        """Test uploads delivered as bytes."""
        text = encode_export(sample_records, UserSettings(), exported_at=FIXED_NOW)
        payload = decode_import(text.encode("utf-8"), today=FIXED_TODAY)
        assert len(payload.records) == 4


class TestImportRejection:
    """Tests for files that must be refused as a whole."""

    def test_not_json(self):
        """Test malformed JSON."""
        with pytest.raises(ImportRejectedError, match="not valid JSON"):
            decode_import("{not json", today=FIXED_TODAY)

    def test_root_not_object(self):
        """Test a JSON array at the top level."""
        with pytest.raises(ImportRejectedError, match="JSON object"):
            decode_import("[]", today=FIXED_TODAY)

    @pytest.mark.parametrize("records", [None, "abc", {"id": "x"}, 5])
    def test_records_not_a_list(self, records):
        """Test the records field shape."""
        with pytest.raises(ImportRejectedError, match="must be a list"):
            decode_import(json.dumps({"records": records}), today=FIXED_TODAY)

    def test_missing_records_field(self):
        """Test a file without records."""
        with pytest.raises(ImportRejectedError):
            decode_import(json.dumps({"settings": {}}), today=FIXED_TODAY)

    def test_settings_not_object(self):
        """Test the settings field shape."""
        with pytest.raises(ImportRejectedError, match="settings"):
            decode_import(import_text([wire_record()], settings=[1, 2]), today=FIXED_TODAY)

    def test_counts_invalid_records(self):
        """Test that every invalid record is counted."""
        records = [
            wire_record("a"),
            wire_record("b", amount="lots"),
            wire_record("c", date="2030-01-01"),
            wire_record("d"),
        ]
        with pytest.raises(ImportRejectedError) as exc_info:
            decode_import(import_text(records), today=FIXED_TODAY)

        error = exc_info.value
        assert error.invalid_count == 2
        assert "2 invalid records" in error.reason
        assert any(line.startswith("Record 2:") for line in error.details)
        assert any(line.startswith("Record 3:") for line in error.details)

    def test_single_invalid_record_message(self):
        """Test singular wording."""
        with pytest.raises(ImportRejectedError, match="1 invalid record found"):
            decode_import(import_text([wire_record(category="Groceries")]), today=FIXED_TODAY)

    def test_missing_id(self):
        """Test that imported records need an id."""
        record = wire_record()
        del record["id"]
        with pytest.raises(ImportRejectedError) as exc_info:
            decode_import(import_text([record]), today=FIXED_TODAY)
        assert exc_info.value.invalid_count == 1

    def test_duplicate_ids(self):
        """Test duplicate ids count as invalid."""
        with pytest.raises(ImportRejectedError) as exc_info:
            decode_import(import_text([wire_record("a"), wire_record("a")]), today=FIXED_TODAY)
        assert exc_info.value.invalid_count == 1
        assert "Duplicate id" in exc_info.value.details[0]

    def test_bad_timestamp(self):
        """Test unreadable createdAt values."""
        with pytest.raises(ImportRejectedError):
            decode_import(
                import_text([wire_record(createdAt="yesterday-ish")]),
                today=FIXED_TODAY,
            )


class TestImportAcceptance:
    """Tests for files that are accepted."""

    def test_amount_as_string(self):
        """Test numeric strings for amount."""
        payload = decode_import(import_text([wire_record(amount="12.30")]), today=FIXED_TODAY)
        assert payload.records[0].amount == Decimal("12.30")

    def test_missing_timestamps_are_stamped(self):
        """Test records without createdAt/updatedAt."""
        record = wire_record()
        del record["createdAt"]
        del record["updatedAt"]
        stamp = datetime(2024, 1, 14, 9, 30, tzinfo=timezone.utc)

        payload = decode_import(import_text([record]), today=FIXED_TODAY, now=stamp)

        assert payload.records[0].created_at == stamp
        assert payload.records[0].updated_at == stamp

    def test_settings_optional(self):
        """Test files without settings or exportedAt."""
        payload = decode_import(import_text([wire_record()]), today=FIXED_TODAY)
        assert payload.settings is None
        assert payload.exported_at is None

    @pytest.mark.parametrize("literal, expected", [
        ("4.500", Decimal("4.5")),
        ("1E+1", Decimal("10")),
        ("12", Decimal("12")),
    ])
    def test_amount_as_json_number(self, literal, expected):
        """Test numbers are accepted however the file writes them."""
        text = import_text([wire_record(amount="__AMOUNT__")]).replace(
            '"__AMOUNT__"', literal
        )
        payload = decode_import(text, today=FIXED_TODAY)
        assert payload.records[0].amount == expected

    def test_amount_with_too_many_places(self):
        """Test a JSON number with a real third decimal place."""
        text = import_text([wire_record(amount="__AMOUNT__")]).replace('"__AMOUNT__"', "4.567")
        with pytest.raises(ImportRejectedError):
            decode_import(text, today=FIXED_TODAY)

    def test_partial_settings(self):
        """Test a settings block with only some keys."""
        payload = decode_import(
            import_text([], settings={"budgetCap": 800}),
            today=FIXED_TODAY,
        )
        assert payload.records == []
        assert payload.settings.budget_cap == 800
        assert payload.settings.base_currency is None

    def test_unreadable_exported_at_is_ignored(self):
        """Test that exportedAt is informational."""
        payload = decode_import(import_text([], exportedAt="last week"), today=FIXED_TODAY)
        assert payload.exported_at is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
