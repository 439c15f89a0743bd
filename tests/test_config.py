"""Tests for application settings and activity logging."""

import pytest
from pathlib import Path

from finance_tracker.activity import ActivityLogger, configure_logging
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models import ActivityEventBuilder, ActivityEventType


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self, monkeypatch):
        """Test values with no environment overrides."""
        for name in ("STORAGE_PATH", "LOG_LEVEL", "RECENT_DAYS"):
            monkeypatch.delenv(f"FINANCE_TRACKER_{name}", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.storage_path == Path("data/finance-tracker.json")
        assert settings.log_level == "INFO"
        assert settings.recent_days == 7
        assert settings.search_case_insensitive is True

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Test FINANCE_TRACKER_* variables."""
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_PATH", str(tmp_path / "x.json"))
        monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "debug")
        monkeypatch.setenv("FINANCE_TRACKER_RECENT_DAYS", "30")
        settings = AppSettings(_env_file=None)
        assert settings.storage_path == tmp_path / "x.json"
        assert settings.log_level == "DEBUG"
        assert settings.recent_days == 30

    def test_unknown_log_level(self):
        """Test log level validation."""
        with pytest.raises(ValueError):
            AppSettings(_env_file=None, log_level="chatty")

    def test_get_settings_is_cached(self):
        """Test that settings load once."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestActivityLogger:
    """Tests for ActivityLogger."""

    def test_recent_events(self):
        """Test that logged events are kept in order."""
        activity = ActivityLogger()
        activity.log_record_added("abc", "Coffee run", "4.50")
        activity.log_record_deleted("abc")
        assert [e.event_type for e in activity.recent] == [
            ActivityEventType.RECORD_ADDED,
            ActivityEventType.RECORD_DELETED,
        ]

    def test_history_is_bounded(self):
        """Test the in-memory history limit."""
        activity = ActivityLogger(history_size=3)
        for index in range(5):
            activity.log(ActivityEventBuilder.export_created(index))
        assert [e.details["record_count"] for e in activity.recent] == [2, 3, 4]

    def test_configure_logging(self, app_settings):
        """Test that logging can be configured and used."""
        configure_logging(app_settings)
        ActivityLogger().log_storage_save_failed("quota")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
