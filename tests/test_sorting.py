"""Tests for record sorting."""

import pytest
from datetime import date

from conftest import make_record
from finance_tracker.search import SortDirection, SortField, SortState, sort_records


class TestSortState:
    """Tests for sort toggling."""

    def test_initial_state_is_newest_first(self):
        """Test default ordering."""
        state = SortState()
        assert state.field == SortField.DATE
        assert state.direction == SortDirection.DESC

    def test_same_field_flips_direction(self):
        """Test clicking the active column."""
        state = SortState().toggled(SortField.DATE)
        assert state.direction == SortDirection.ASC
        assert state.toggled(SortField.DATE).direction == SortDirection.DESC

    def test_new_field_starts_ascending(self):
        """Test clicking another column."""
        state = SortState().toggled(SortField.AMOUNT)
        assert state.field == SortField.AMOUNT
        assert state.direction == SortDirection.ASC

    def test_accepts_plain_string(self):
        """Test field given by name."""
        assert SortState().toggled("description").field == SortField.DESCRIPTION


class TestSortRecords:
    """Tests for sort_records."""

    def test_by_date_descending(self, sample_records):
        """Test default order."""
        result = sort_records(sample_records)
        assert [record.id for record in result] == ["rec-3", "rec-1", "rec-2", "rec-4"]

    def test_by_amount_ascending(self, sample_records):
        """Test numeric ordering of amounts."""
        result = sort_records(sample_records, SortField.AMOUNT, SortDirection.ASC)
        assert [record.id for record in result] == ["rec-1", "rec-4", "rec-2", "rec-3"]

    def test_by_description_ignores_case(self):
        """Test case-insensitive text ordering."""
        records = [
            make_record("r1", "banana bread"),
            make_record("r2", "Apple pie"),
            make_record("r3", "cherry tart"),
        ]
        result = sort_records(records, SortField.DESCRIPTION, SortDirection.ASC)
        assert [record.id for record in result] == ["r2", "r1", "r3"]

    def test_stable_for_equal_keys(self):
        """Test that ties keep their original order in both directions."""
        same_day = date(2024, 1, 10)
        records = [
            make_record("r1", record_date=same_day),
            make_record("r2", record_date=same_day),
            make_record("r3", record_date=same_day),
        ]
        for direction in SortDirection:
            result = sort_records(records, SortField.DATE, direction)
            assert [record.id for record in result] == ["r1", "r2", "r3"]

    def test_does_not_modify_input(self, sample_records):
        """Test that the input list is left alone."""
        before = list(sample_records)
        sort_records(sample_records, SortField.AMOUNT, SortDirection.ASC)
        assert sample_records == before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
