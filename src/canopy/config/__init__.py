"""Configuration module for canopy.

Constants shared with the database schema, environment-driven settings and
logging setup.
"""

from .constants import (
    ContentAction,
    CONTENT_PERMISSION_PREFIX,
    DatabaseSchemas,
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLE_DESCRIPTIONS,
    DEFAULT_ROLE_PERMISSIONS,
    FractionalIndexAlphabet,
    OWNERSHIP_SUFFIX,
    PERMISSION_SEPARATOR,
    PermissionScope,
    ResourceTypes,
    Roles,
    ShortIdFormat,
)
from .settings import CanopySettings, get_settings, reset_settings_cache
from .logging_config import (
    setup_logging,
    get_logger,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "ContentAction",
    "CONTENT_PERMISSION_PREFIX",
    "DatabaseSchemas",
    "DEFAULT_PERMISSIONS",
    "DEFAULT_ROLE_DESCRIPTIONS",
    "DEFAULT_ROLE_PERMISSIONS",
    "FractionalIndexAlphabet",
    "OWNERSHIP_SUFFIX",
    "PERMISSION_SEPARATOR",
    "PermissionScope",
    "ResourceTypes",
    "Roles",
    "ShortIdFormat",

    # Settings
    "CanopySettings",
    "get_settings",
    "reset_settings_cache",

    # Logging
    "setup_logging",
    "get_logger",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
