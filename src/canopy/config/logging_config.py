"""Centralized logging configuration for canopy.

Provides consistent, configurable logging with environment-based control
over verbosity, format and per-subsystem noise.
"""

import logging
import logging.config
import os
from enum import Enum


class LogLevel(str, Enum):
    """Level names accepted by LOG_LEVEL."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """Presets accepted by LOG_VERBOSITY."""
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Translate a LOG_VERBOSITY preset into a level name; unknown presets mean WARNING."""
    verbosity_map = {
        LogVerbosity.QUIET: LogLevel.ERROR.value,
        LogVerbosity.NORMAL: LogLevel.WARNING.value,
        LogVerbosity.VERBOSE: LogLevel.INFO.value,
        LogVerbosity.DEBUG: LogLevel.DEBUG.value,
    }
    try:
        return verbosity_map[LogVerbosity(verbosity.upper())]
    except ValueError:
        return LogLevel.WARNING.value


class LoggingConfig:
    """Builds and applies the canopy ``dictConfig``."""

    # Subsystems kept at WARNING unless running in debug mode
    DEFAULT_QUIET_MODULES = [
        "canopy.database",
        "canopy.features.content.repositories",
    ]

    # Pinned to ERROR
    ERROR_ONLY_MODULES = [
        "asyncio",
    ]

    FORMATS = {
        LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
        LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
    }

    @classmethod
    def build_config(cls) -> dict:
        """Build a ``dictConfig`` mapping from environment variables."""
        log_verbosity = os.getenv("LOG_VERBOSITY", "NORMAL").upper()
        log_format = os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower()
        enable_sql_logging = os.getenv("ENABLE_SQL_LOGGING", "false").lower() == "true"
        enable_access_logging = os.getenv("ENABLE_ACCESS_LOGGING", "false").lower() == "true"

        # An explicit LOG_LEVEL wins over the verbosity preset
        effective_log_level = os.getenv("LOG_LEVEL", "").upper() or get_log_level_from_verbosity(log_verbosity)
        if effective_log_level not in LogLevel.__members__:
            effective_log_level = LogLevel.WARNING.value

        try:
            format_string = cls.FORMATS[LogFormat(log_format)]
        except ValueError:
            format_string = cls.FORMATS[LogFormat.SIMPLE]

        logging_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        pinned = {}
        quiet_level = "DEBUG" if effective_log_level == "DEBUG" else "WARNING"
        for module in cls.DEFAULT_QUIET_MODULES:
            pinned[module] = quiet_level
        for module in cls.ERROR_ONLY_MODULES:
            pinned[module] = "ERROR"
        if not enable_sql_logging:
            pinned["asyncpg"] = "WARNING"
        if not enable_access_logging:
            # Per-check decision logs
            pinned["canopy.features.access"] = "INFO" if effective_log_level == "DEBUG" else "WARNING"

        logging_config["loggers"] = {
            module: {"level": level, "handlers": ["console"], "propagate": False}
            for module, level in pinned.items()
        }
        return logging_config

    @classmethod
    def configure(cls) -> None:
        """Apply the environment-derived configuration."""
        config = cls.build_config()
        logging.config.dictConfig(config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={config['root']['level']}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))

    @classmethod
    def silence_module(cls, module_name: str) -> None:
        """Silence all logging from a module."""
        cls.set_module_level(module_name, "CRITICAL")


def setup_logging() -> None:
    """Configure logging from LOG_LEVEL, LOG_VERBOSITY and LOG_FORMAT.

    Called once when ``canopy`` is imported.
    """
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name (usually ``__name__``)."""
    return logging.getLogger(name)
