"""
Runtime settings for canopy.

Values come from ``CANOPY_``-prefixed environment variables or a ``.env``
file; every field has a development default.
"""
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CONTENT_PERMISSION_PREFIX,
    DatabaseSchemas,
    ResourceTypes,
)


class CanopySettings(BaseSettings):
    """Settings for the content store and access engine."""

    model_config = SettingsConfigDict(
        env_prefix="CANOPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database Configuration
    database_url: Optional[str] = Field(default=None)
    db_pool_min_size: int = Field(default=2, ge=0)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=30.0, gt=0)
    db_max_inactive_connection_lifetime: float = Field(default=300.0, ge=0)
    application_name: str = Field(default="canopy")

    # Schema names
    content_schema: str = Field(default=DatabaseSchemas.CONTENT)
    auth_schema: str = Field(default=DatabaseSchemas.AUTH)

    # Hierarchy traversal
    max_hierarchy_depth: int = Field(default=1000, ge=1)

    # Access control
    content_resource_type: str = Field(default=ResourceTypes.CONTENT_BLOCK)
    content_permission_prefix: str = Field(default=CONTENT_PERMISSION_PREFIX)

    @field_validator("content_schema", "auth_schema")
    @classmethod
    def _validate_schema_name(cls, value: str) -> str:
        # Interpolated into SQL, so only plain identifiers are accepted
        if not value.isidentifier():
            raise ValueError(f"Invalid schema name: {value}")
        return value

    @field_validator("database_url")
    @classmethod
    def _strip_driver_suffix(cls, value: Optional[str]) -> Optional[str]:
        if value and "+asyncpg" in value:
            return value.replace("+asyncpg", "")
        return value

    def get_pool_config(self) -> Dict[str, Any]:
        """Keyword arguments for ``asyncpg.create_pool``."""
        return {
            "min_size": self.db_pool_min_size,
            "max_size": self.db_pool_max_size,
            "command_timeout": self.db_command_timeout,
            "max_inactive_connection_lifetime": self.db_max_inactive_connection_lifetime,
        }


@lru_cache()
def get_settings() -> CanopySettings:
    """Get cached settings instance."""
    return CanopySettings()


def reset_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
