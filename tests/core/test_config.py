"""
Tests for shipgrid settings.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest import mock

import pytest
from pydantic import ValidationError

from shipgrid.core.config import (
    ShipgridSettings,
    get_settings,
    is_debug_enabled,
    reset_settings,
)


class TestShipgridSettings:
    """Test ShipgridSettings class."""

    def test_default_values(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = ShipgridSettings()

            assert settings.log_level == "WARNING"
            assert settings.debug is False
            assert settings.log_json is False
            assert settings.bw_penalty_k == 0.01
            assert settings.history_limit == 100
            assert settings.catalog_path is None

    def test_log_level_case_insensitive(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_LOG_LEVEL": "debug"}, clear=True):
            settings = ShipgridSettings()
            assert settings.log_level == "DEBUG"
            assert settings.effective_log_level == "DEBUG"

    def test_debug_legacy_flag(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_DEBUG": "1"}, clear=True):
            settings = ShipgridSettings()
            assert settings.effective_log_level == "DEBUG"

    def test_debug_legacy_does_not_override_explicit_level(self):
        env = {"SHIPGRID_LOG_LEVEL": "ERROR", "SHIPGRID_DEBUG": "1"}
        with mock.patch.dict(os.environ, env, clear=True):
            settings = ShipgridSettings()
            assert settings.debug is True
            assert settings.effective_log_level == "ERROR"

    def test_engine_settings_from_env(self):
        env = {
            "SHIPGRID_BW_PENALTY_K": "0.05",
            "SHIPGRID_HISTORY_LIMIT": "5",
            "SHIPGRID_CATALOG_PATH": "/tmp/catalog.yaml",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = ShipgridSettings()
            assert settings.bw_penalty_k == 0.05
            assert settings.history_limit == 5
            assert settings.catalog_path == Path("/tmp/catalog.yaml")

    def test_negative_penalty_rejected(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_BW_PENALTY_K": "-1"}, clear=True):
            with pytest.raises(ValidationError):
                ShipgridSettings()

    def test_zero_history_limit_rejected(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_HISTORY_LIMIT": "0"}, clear=True):
            with pytest.raises(ValidationError):
                ShipgridSettings()

    def test_invalid_log_level_rejected(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_LOG_LEVEL": "VERBOSE"}, clear=True):
            with pytest.raises(ValidationError):
                ShipgridSettings()


class TestSettingsSingleton:
    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings_reloads_environment(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_HISTORY_LIMIT": "7"}, clear=True):
            reset_settings()
            assert get_settings().history_limit == 7

        with mock.patch.dict(os.environ, {"SHIPGRID_HISTORY_LIMIT": "9"}, clear=True):
            assert get_settings().history_limit == 7
            reset_settings()
            assert get_settings().history_limit == 9

    def test_is_debug_enabled(self):
        with mock.patch.dict(os.environ, {"SHIPGRID_LOG_LEVEL": "DEBUG"}, clear=True):
            reset_settings()
            assert is_debug_enabled() is True

        with mock.patch.dict(os.environ, {}, clear=True):
            reset_settings()
            assert is_debug_enabled() is False
