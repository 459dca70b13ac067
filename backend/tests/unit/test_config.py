"""
Unit tests for configuration constants.
"""

from importlib import reload

import pytest

import core.config
from core.config import (
    DATABASE_URL, FRONTEND_URL, ALLOW_LEAVE_BACKFILL,
    CLINIC_UTC_OFFSET_HOURS, DEFAULT_SLOT_DURATION_MINUTES, _get_bool,
)


class TestConfigConstants:
    """Test cases for configuration constants."""

    def test_default_values(self):
        """Test default configuration values."""
        assert FRONTEND_URL == "http://localhost:3000"
        assert ALLOW_LEAVE_BACKFILL is False
        assert CLINIC_UTC_OFFSET_HOURS == 5.5
        assert DEFAULT_SLOT_DURATION_MINUTES == 15
        # DATABASE_URL is overridden to SQLite by the test configuration
        assert DATABASE_URL.startswith(("postgresql://", "sqlite://"))

    def test_environment_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("ALLOW_LEAVE_BACKFILL", "true")
        monkeypatch.setenv("DEFAULT_SLOT_DURATION_MINUTES", "20")

        try:
            reload(core.config)

            assert core.config.ALLOW_LEAVE_BACKFILL is True
            assert core.config.DEFAULT_SLOT_DURATION_MINUTES == 20
        finally:
            monkeypatch.undo()
            reload(core.config)


class TestGetBool:

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, monkeypatch, raw):
        monkeypatch.setenv("SOME_FLAG", raw)
        assert _get_bool("SOME_FLAG") is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "", "maybe"])
    def test_falsy(self, monkeypatch, raw):
        monkeypatch.setenv("SOME_FLAG", raw)
        assert _get_bool("SOME_FLAG") is False

    def test_default(self, monkeypatch):
        monkeypatch.delenv("SOME_FLAG", raising=False)
        assert _get_bool("SOME_FLAG", "true") is True
