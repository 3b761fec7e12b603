"""Tests for settings and logging configuration."""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from canopy.config import (
    CanopySettings,
    LogFormat,
    LoggingConfig,
    get_settings,
    reset_settings_cache,
)


class TestCanopySettings:
    """Environment-driven settings."""

    def test_defaults(self):
        settings = CanopySettings(_env_file=None)

        assert settings.content_schema == "content"
        assert settings.auth_schema == "auth"
        assert settings.max_hierarchy_depth == 1000
        assert settings.content_resource_type == "content_block"
        assert settings.content_permission_prefix == "content_blocks"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("CANOPY_DATABASE_URL", "postgresql+asyncpg://u:p@db/canopy")
        monkeypatch.setenv("CANOPY_MAX_HIERARCHY_DEPTH", "50")

        settings = CanopySettings(_env_file=None)

        assert settings.database_url == "postgresql://u:p@db/canopy"
        assert settings.max_hierarchy_depth == 50

    @pytest.mark.parametrize("name", ["content; DROP TABLE x", "my-schema", ""])
    def test_schema_names_must_be_identifiers(self, name):
        with pytest.raises(PydanticValidationError):
            CanopySettings(_env_file=None, content_schema=name)

    def test_depth_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            CanopySettings(_env_file=None, max_hierarchy_depth=0)

    def test_pool_config(self):
        settings = CanopySettings(_env_file=None, db_pool_min_size=1, db_pool_max_size=4)

        config = settings.get_pool_config()

        assert config["min_size"] == 1
        assert config["max_size"] == 4
        assert set(config) == {"min_size", "max_size", "command_timeout", "max_inactive_connection_lifetime"}

    def test_get_settings_is_cached(self, monkeypatch):
        reset_settings_cache()
        try:
            first = get_settings()
            assert get_settings() is first

            monkeypatch.setenv("CANOPY_APPLICATION_NAME", "other")
            reset_settings_cache()
            assert get_settings().application_name == "other"
        finally:
            reset_settings_cache()


class TestLoggingConfig:
    """dictConfig built from environment variables."""

    def test_default_level_is_warning(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_VERBOSITY", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "WARNING"
        assert config["loggers"]["asyncpg"]["level"] == "WARNING"

    def test_verbosity_and_explicit_level(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_VERBOSITY", "verbose")
        assert LoggingConfig.build_config()["root"]["level"] == "INFO"

        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = LoggingConfig.build_config()
        assert config["root"]["level"] == "DEBUG"
        assert config["loggers"]["canopy.database"]["level"] == "DEBUG"

    def test_unknown_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        monkeypatch.setenv("LOG_FORMAT", "xml")

        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "WARNING"
        assert config["formatters"]["default"]["format"] == LoggingConfig.FORMATS[LogFormat.SIMPLE]

    def test_sql_logging_toggle(self, monkeypatch):
        monkeypatch.setenv("ENABLE_SQL_LOGGING", "true")

        assert "asyncpg" not in LoggingConfig.build_config()["loggers"]

    def test_silence_module(self):
        LoggingConfig.silence_module("canopy.tests.noisy")

        assert logging.getLogger("canopy.tests.noisy").level == logging.CRITICAL
