"""
Configuration Validation Tests

Verifies that the engine fails early and clearly when required environment
variables are missing or invalid, and that secrets never reach the summary.
"""

import importlib
import logging
import os
from unittest.mock import patch

import pytest

import pulse_engine.config.config as config_module


@pytest.fixture
def valid_config(monkeypatch):
    """Patch the module to a valid production configuration."""
    monkeypatch.setattr(config_module, "APP_ENV", "production")
    monkeypatch.setattr(config_module, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(config_module, "SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setattr(config_module, "UPDATE_BATCH_SIZE", 50)
    monkeypatch.setattr(config_module, "UPDATE_BATCH_DELAY", 0.5)
    monkeypatch.setattr(config_module, "REQUEST_TIMEOUT", 30)
    monkeypatch.setattr(config_module, "SCORING_WORKERS", 1)
    monkeypatch.setattr(config_module, "LEXICON_PATH", "")
    return config_module


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_valid_production_config(self, valid_config):
        assert valid_config.validate_config() == []

    def test_missing_supabase_url_in_production(self, valid_config, monkeypatch):
        monkeypatch.setattr(config_module, "SUPABASE_URL", "")
        errors = config_module.validate_config()
        assert any("SUPABASE_URL" in error for error in errors)

    def test_both_credentials_missing_reports_both(self, valid_config, monkeypatch):
        monkeypatch.setattr(config_module, "SUPABASE_URL", "")
        monkeypatch.setattr(config_module, "SUPABASE_SERVICE_ROLE_KEY", "")
        errors = config_module.validate_config()
        assert len(errors) == 2

    def test_credentials_optional_in_development(self, valid_config, monkeypatch):
        monkeypatch.setattr(config_module, "APP_ENV", "development")
        monkeypatch.setattr(config_module, "SUPABASE_URL", "")
        monkeypatch.setattr(config_module, "SUPABASE_SERVICE_ROLE_KEY", "")
        assert config_module.validate_config() == []
        assert config_module.is_development()
        assert not config_module.is_production()

    @pytest.mark.parametrize("name,value", [
        ("UPDATE_BATCH_SIZE", 0),
        ("UPDATE_BATCH_DELAY", -1.0),
        ("REQUEST_TIMEOUT", 0),
        ("SCORING_WORKERS", 0),
        ("RELATED_POSTS_LIMIT", -1),
    ])
    def test_invalid_numbers(self, valid_config, monkeypatch, name, value):
        monkeypatch.setattr(config_module, name, value)
        errors = config_module.validate_config()
        assert any(name in error for error in errors)

    def test_missing_lexicon_file(self, valid_config, monkeypatch, tmp_path):
        monkeypatch.setattr(config_module, "LEXICON_PATH", str(tmp_path / "missing.json"))
        errors = config_module.validate_config()
        assert any("LEXICON_PATH" in error for error in errors)


class TestEnvironmentLoading:
    """Tests for values read from the environment."""

    def test_values_read_from_environment(self):
        try:
            with patch.dict(os.environ, {
                "APP_ENV": "staging",
                "UPDATE_BATCH_SIZE": "25",
                "UPDATE_BATCH_DELAY": "1.5",
                "DEBUG": "TRUE",
            }):
                importlib.reload(config_module)
                assert config_module.APP_ENV == "staging"
                assert config_module.UPDATE_BATCH_SIZE == 25
                assert config_module.UPDATE_BATCH_DELAY == 1.5
                assert config_module.DEBUG is True
        finally:
            importlib.reload(config_module)


class TestConfigOutput:
    """Tests for print_config_summary() and configure_logging()."""

    def test_summary_masks_service_key(self, valid_config, capsys):
        config_module.print_config_summary()
        out = capsys.readouterr().out
        assert "service-role-key" not in out
        assert "SUPABASE_SERVICE_ROLE_KEY: ***" in out
        assert "https://project.supabase.co" in out

    def test_summary_unset_values(self, valid_config, monkeypatch, capsys):
        monkeypatch.setattr(config_module, "SUPABASE_SERVICE_ROLE_KEY", "")
        config_module.print_config_summary()
        out = capsys.readouterr().out
        assert "SUPABASE_SERVICE_ROLE_KEY: (not set)" in out
        assert "LEXICON_PATH: (built-in)" in out

    def test_verbose_forces_debug(self):
        with patch("pulse_engine.config.config.logging.basicConfig") as mock_basic:
            config_module.configure_logging(verbose=True)
        assert mock_basic.call_args.kwargs["level"] == logging.DEBUG

    def test_log_level_setting(self, monkeypatch):
        monkeypatch.setattr(config_module, "DEBUG", False)
        monkeypatch.setattr(config_module, "LOG_LEVEL", "WARNING")
        with patch("pulse_engine.config.config.logging.basicConfig") as mock_basic:
            config_module.configure_logging()
        assert mock_basic.call_args.kwargs["level"] == logging.WARNING
